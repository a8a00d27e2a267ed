"""Failure types surfaced by the logistics core.

``InvalidInput`` and ``TransitionNotAllowed`` are caller errors (4xx class)
and leave the shipment untouched. Both subclass protean's ``ValidationError``
so they carry the usual ``{"field": ["message"]}`` payload.
``PersistenceFailure`` is fatal (5xx class).
"""

from protean.exceptions import ValidationError


class InvalidInput(ValidationError):
    """Input that cannot be normalized, priced or stored."""


class TransitionNotAllowed(ValidationError):
    """A lifecycle status change rejected by the transition rules.

    ``code`` names the rule that failed: ``sequence``, ``mode_unknown``,
    ``payment_required``, ``verification_required`` or ``stale_status``.
    """

    def __init__(self, messages, code: str = "sequence", **kwargs):
        super().__init__(messages, **kwargs)
        self.code = code


class PersistenceFailure(Exception):
    """Storage became unavailable while writing; nothing was committed."""
