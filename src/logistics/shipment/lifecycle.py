"""Lifecycle orchestrator — the entry point callers use to drive a shipment.

Each operation dispatches one command, so each write runs in exactly one
unit of work. Milestone notifications are handed to the injected sink only
after that unit of work has committed; a failing sink is logged and never
undoes or fails the transition.
"""

import json

import structlog
from protean.exceptions import TransactionError
from protean.utils.globals import current_domain
from sqlalchemy.exc import SQLAlchemyError

from logistics.errors import PersistenceFailure
from logistics.notification.port import MilestoneNotification, NotificationSink
from logistics.shipment.labels import is_milestone, notification_message, status_label
from logistics.shipment.payment import UpdatePaymentCollectionStatus
from logistics.shipment.registration import RegisterShipment
from logistics.shipment.shipment import Shipment
from logistics.shipment.status import AdvanceShipmentStatus
from logistics.shipment.verification import VerifyShipmentAtWarehouse

logger = structlog.get_logger(__name__)


class ShipmentLifecycle:
    """Warehouse verification, status advancement and their side effects."""

    def __init__(self, notifier: NotificationSink):
        self.notifier = notifier

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _process(self, command):
        try:
            return current_domain.process(command, asynchronous=False)
        except (SQLAlchemyError, TransactionError) as exc:
            logger.error(
                "Storage failure while processing command",
                command=type(command).__name__,
                error=str(exc),
            )
            raise PersistenceFailure(f"Could not persist {type(command).__name__}") from exc

    def _load(self, shipment_id: str) -> Shipment:
        return current_domain.repository_for(Shipment).get(shipment_id)

    def _notify(self, shipment: Shipment) -> None:
        if not is_milestone(shipment.status):
            return

        notification = MilestoneNotification(
            shipment_id=str(shipment.id),
            tracking_number=shipment.tracking_number,
            status=shipment.status,
            status_label=status_label(shipment.status),
            recipient_contact=shipment.recipient_contact,
            message=notification_message(shipment.status, shipment.tracking_number),
        )
        try:
            self.notifier.send(notification)
        except Exception as exc:
            logger.warning(
                "Milestone notification failed",
                shipment_id=notification.shipment_id,
                status=notification.status,
                error=str(exc),
            )

    # -------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------
    def register_shipment(
        self,
        sender_id: str,
        recipient_contact: str | None = None,
        shipment_type: str | None = None,
        legacy_weight_kg: float | None = None,
        created_by: str | None = None,
    ) -> Shipment:
        shipment_id = self._process(
            RegisterShipment(
                sender_id=sender_id,
                recipient_contact=recipient_contact,
                shipment_type=shipment_type,
                legacy_weight_kg=legacy_weight_kg,
                created_by=created_by,
            )
        )
        return self._load(shipment_id)

    def verify_at_warehouse(
        self,
        shipment_id: str,
        verified_by: str,
        packages: list[dict],
        transport_mode: str | None = None,
        manual_final_charge_usd: float | None = None,
        manual_adjustment_reason: str | None = None,
    ) -> Shipment:
        """Measure, price and verify a shipment; returns the refreshed shipment."""
        self._process(
            VerifyShipmentAtWarehouse(
                shipment_id=shipment_id,
                verified_by=verified_by,
                packages=json.dumps(packages),
                transport_mode=getattr(transport_mode, "value", transport_mode),
                manual_final_charge_usd=manual_final_charge_usd,
                manual_adjustment_reason=manual_adjustment_reason,
            )
        )
        shipment = self._load(shipment_id)
        self._notify(shipment)
        return shipment

    def advance_status(
        self,
        shipment_id: str,
        target_status: str,
        actor_id: str,
        expected_current_status: str | None = None,
    ) -> Shipment:
        """Validate and apply a status change, then notify on milestones."""
        self._process(
            AdvanceShipmentStatus(
                shipment_id=shipment_id,
                target_status=getattr(target_status, "value", target_status),
                actor_id=actor_id,
                expected_current_status=getattr(expected_current_status, "value", expected_current_status),
            )
        )
        shipment = self._load(shipment_id)
        logger.info(
            "Shipment status advanced",
            shipment_id=str(shipment.id),
            status=shipment.status,
            actor_id=actor_id,
        )
        self._notify(shipment)
        return shipment

    def update_payment_collection_status(self, shipment_id: str, payment_collection_status: str) -> Shipment:
        self._process(
            UpdatePaymentCollectionStatus(
                shipment_id=shipment_id,
                payment_collection_status=getattr(payment_collection_status, "value", payment_collection_status),
            )
        )
        return self._load(shipment_id)
