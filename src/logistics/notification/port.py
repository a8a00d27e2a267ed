"""Notification sink port — where milestone notifications are handed off.

The lifecycle only builds the payload; delivery (email, SMS, WhatsApp) is
the adapter's business. Adapters signal failure by raising.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class NotificationDeliveryError(Exception):
    """The sink could not accept a notification."""


@dataclass(frozen=True)
class MilestoneNotification:
    """A customer-facing milestone reached by a shipment."""

    shipment_id: str
    tracking_number: str
    status: str
    status_label: str
    recipient_contact: str | None = None
    message: str | None = None


class NotificationSink(ABC):
    """Abstract interface for notification sinks."""

    @abstractmethod
    def send(self, notification: MilestoneNotification) -> None:
        """Accept ``notification`` for delivery or raise ``NotificationDeliveryError``."""
        ...
