"""Pricing rule aggregates — tenant-wide default rules and per-customer overrides.

Both share one rate shape:

- AIR rules carry a weight band (``min_weight_kg``/``max_weight_kg``, either
  bound may be open) and a ``rate_usd_per_kg``.
- SEA rules carry a ``flat_rate_usd_per_cbm``.

A rule applies at an instant when it is active and the instant lies inside
its validity window (inclusive, open bounds unbounded).
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, String, Text

from logistics.domain import logistics
from logistics.shipment.enums import TransportMode


def _aware(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def check_rate_shape(mode, min_weight_kg, max_weight_kg, rate_usd_per_kg, flat_rate_usd_per_cbm) -> None:
    """Raise ``ValidationError`` when the rate fields do not fit the mode."""
    if mode is None:
        return
    if TransportMode(mode) == TransportMode.AIR:
        if rate_usd_per_kg is None or rate_usd_per_kg <= 0:
            raise ValidationError({"rate_usd_per_kg": ["Air rules need a positive rate per kg"]})
        if min_weight_kg is not None and max_weight_kg is not None and min_weight_kg > max_weight_kg:
            raise ValidationError({"max_weight_kg": ["Maximum weight cannot be below the minimum weight"]})
    elif flat_rate_usd_per_cbm is None or flat_rate_usd_per_cbm <= 0:
        raise ValidationError({"flat_rate_usd_per_cbm": ["Sea rules need a positive flat rate per cbm"]})


def check_window(starts, ends, field_name: str) -> None:
    if starts is not None and ends is not None and _aware(ends) < _aware(starts):
        raise ValidationError({field_name: ["Validity window cannot end before it starts"]})


def in_window(at: datetime, starts: datetime | None, ends: datetime | None) -> bool:
    at = _aware(at)
    if starts is not None and _aware(starts) > at:
        return False
    if ends is not None and _aware(ends) < at:
        return False
    return True


@logistics.aggregate
class PricingRule:
    """A default rate that applies to every customer without an override."""

    name = String(required=True, max_length=255)
    mode = String(required=True, choices=TransportMode)
    min_weight_kg = Float()
    max_weight_kg = Float()
    rate_usd_per_kg = Float()
    flat_rate_usd_per_cbm = Float()
    is_active = Boolean(default=True)
    effective_from = DateTime()
    effective_to = DateTime()
    created_by = Identifier(required=True)
    updated_by = Identifier()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def rate_fits_mode(self):
        check_rate_shape(
            self.mode,
            self.min_weight_kg,
            self.max_weight_kg,
            self.rate_usd_per_kg,
            self.flat_rate_usd_per_cbm,
        )

    @invariant.post
    def window_is_ordered(self):
        check_window(self.effective_from, self.effective_to, "effective_to")

    def applies_at(self, at: datetime) -> bool:
        return bool(self.is_active) and in_window(at, self.effective_from, self.effective_to)

    def deactivate(self, updated_by: str) -> None:
        self.is_active = False
        self.updated_by = updated_by
        self.updated_at = datetime.now(UTC)


@logistics.aggregate
class CustomerPricingOverride:
    """A negotiated rate for one customer; wins over the default rules."""

    customer_id = Identifier(required=True)
    mode = String(required=True, choices=TransportMode)
    min_weight_kg = Float()
    max_weight_kg = Float()
    rate_usd_per_kg = Float()
    flat_rate_usd_per_cbm = Float()
    starts_at = DateTime()
    ends_at = DateTime()
    is_active = Boolean(default=True)
    notes = Text()
    created_by = Identifier(required=True)
    updated_by = Identifier()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def rate_fits_mode(self):
        check_rate_shape(
            self.mode,
            self.min_weight_kg,
            self.max_weight_kg,
            self.rate_usd_per_kg,
            self.flat_rate_usd_per_cbm,
        )

    @invariant.post
    def window_is_ordered(self):
        check_window(self.starts_at, self.ends_at, "ends_at")

    def applies_at(self, at: datetime) -> bool:
        return bool(self.is_active) and in_window(at, self.starts_at, self.ends_at)

    def deactivate(self, updated_by: str) -> None:
        self.is_active = False
        self.updated_by = updated_by
        self.updated_at = datetime.now(UTC)


def _newest_first(rules: list) -> list:
    epoch = datetime.min.replace(tzinfo=UTC)
    return sorted(
        rules,
        key=lambda r: (_aware(r.updated_at) or epoch, _aware(r.created_at) or epoch),
        reverse=True,
    )


@logistics.repository(part_of=PricingRule)
class PricingRuleRepository:
    def active_for(self, mode, at: datetime) -> list[PricingRule]:
        """Rules for ``mode`` in force at ``at``, most recently updated first."""
        rules = self._dao.query.filter(mode=TransportMode(mode).value, is_active=True).all().items
        return _newest_first([r for r in rules if r.applies_at(at)])


@logistics.repository(part_of=CustomerPricingOverride)
class CustomerPricingOverrideRepository:
    def active_for(self, customer_id: str, mode, at: datetime) -> list[CustomerPricingOverride]:
        """Overrides for one customer and ``mode`` in force at ``at``, most recently updated first."""
        overrides = (
            self._dao.query.filter(
                customer_id=str(customer_id),
                mode=TransportMode(mode).value,
                is_active=True,
            )
            .all()
            .items
        )
        return _newest_first([o for o in overrides if o.applies_at(at)])
