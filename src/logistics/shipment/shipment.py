"""Shipment aggregate (CQRS): one consignment tracked from booking to pickup.

The shipment owns its warehouse packages, its pricing fields and its single
authoritative lifecycle ``status``. ``customer_status`` is never written on
its own: it is always projected from ``status`` in the same change.

State Machine:
    See ``logistics.shipment.transitions``. Warehouse verification is the only
    way into WAREHOUSE_VERIFIED_PRICED and the only place the transport mode
    is assigned; every other move goes through ``advance_status``.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String

from logistics.domain import logistics
from logistics.errors import InvalidInput, TransitionNotAllowed
from logistics.shipment.enums import (
    PaymentCollectionStatus,
    PricingSource,
    ShipmentStatus,
    TransportMode,
)
from logistics.shipment.events import (
    PaymentCollectionStatusChanged,
    ShipmentRegistered,
    ShipmentStatusChanged,
    ShipmentVerifiedAtWarehouse,
)
from logistics.shipment.labels import customer_status_for
from logistics.shipment.legacy import resolve_transport_mode
from logistics.shipment.packages import NormalizedPackages
from logistics.shipment.tracking import generate_tracking_number
from logistics.shipment.transitions import (
    COMMON_FLOW,
    initial_status_for_mode,
    is_exception_status,
    validate_transition,
)

# Exception statuses the warehouse may verify from, provided the shipment
# was still in the common flow when it entered them
_VERIFIABLE_HOLDS = frozenset(
    {
        ShipmentStatus.ON_HOLD,
        ShipmentStatus.RESTRICTED_ITEM_OVERRIDE_APPROVED,
    }
)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@logistics.entity(part_of="Shipment")
class Package:
    """A physical package measured at the warehouse."""

    description = String(max_length=500)
    item_type = String(max_length=100)
    quantity = Integer(required=True, min_value=1, default=1)
    length_cm = Float()
    width_cm = Float()
    height_cm = Float()
    weight_kg = Float()
    cbm = Float()
    is_restricted = Boolean(default=False)
    restricted_reason = String(max_length=500)
    restricted_override_approved = Boolean(default=False)
    restricted_override_reason = String(max_length=500)
    restricted_override_by = Identifier()


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@logistics.aggregate
class Shipment:
    tracking_number = String(required=True, max_length=50, unique=True)
    sender_id = Identifier(required=True)
    recipient_contact = String(max_length=255)
    legacy_weight_kg = Float()
    requested_mode = String(choices=TransportMode)
    transport_mode = String(choices=TransportMode)
    status = String(choices=ShipmentStatus)
    customer_status = String(choices=ShipmentStatus)
    last_flow_status = String(choices=ShipmentStatus)  # latest non-exception status
    payment_collection_status = String(
        choices=PaymentCollectionStatus,
        default=PaymentCollectionStatus.UNPAID.value,
    )
    packages = HasMany(Package)
    calculated_charge_usd = Float()
    final_charge_usd = Float()
    pricing_source = String(choices=PricingSource)
    price_adjustment_reason = String(max_length=1000)
    price_calculated_at = DateTime()
    price_calculated_by = Identifier()
    created_by = Identifier()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def customer_status_mirrors_status(self):
        if self.customer_status != customer_status_for(self.status):
            raise ValidationError({"customer_status": ["Customer status must mirror the shipment status"]})

    @invariant.post
    def priced_shipments_have_a_mode(self):
        if self.final_charge_usd is not None and not self.transport_mode:
            raise ValidationError({"transport_mode": ["A priced shipment must have a transport mode"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def register(
        cls,
        sender_id: str,
        recipient_contact: str | None = None,
        shipment_type: str | None = None,
        legacy_weight_kg: float | None = None,
        created_by: str | None = None,
    ):
        """Book a new shipment at the start of the common flow."""
        now = datetime.now(UTC)
        requested_mode = resolve_transport_mode(shipment_type)
        status = initial_status_for_mode().value
        shipment = cls(
            tracking_number=generate_tracking_number(now),
            sender_id=sender_id,
            recipient_contact=recipient_contact,
            legacy_weight_kg=legacy_weight_kg,
            requested_mode=requested_mode.value if requested_mode else None,
            status=status,
            customer_status=customer_status_for(status),
            last_flow_status=status,
            payment_collection_status=PaymentCollectionStatus.UNPAID.value,
            created_by=created_by,
            created_at=now,
            updated_at=now,
        )
        shipment.raise_(
            ShipmentRegistered(
                shipment_id=str(shipment.id),
                tracking_number=shipment.tracking_number,
                sender_id=sender_id,
                requested_mode=shipment.requested_mode,
                registered_at=now,
            )
        )
        shipment.raise_(
            ShipmentStatusChanged(
                shipment_id=str(shipment.id),
                status=status,
                actor_id=created_by,
                occurred_at=now,
            )
        )
        return shipment

    # -------------------------------------------------------------------
    # Warehouse verification
    # -------------------------------------------------------------------
    def _assert_mode_unchanged(self, mode: TransportMode) -> None:
        if self.transport_mode and TransportMode(self.transport_mode) != mode:
            raise InvalidInput(
                {"transport_mode": [f"Transport mode is already {self.transport_mode} and cannot change to {mode.value}"]}
            )

    def _assert_verifiable(self) -> None:
        if self.status is None:
            return
        status = ShipmentStatus(self.status)
        if status in _VERIFIABLE_HOLDS and self.last_flow_status:
            # A hold is judged by where the shipment stood before it
            status = ShipmentStatus(self.last_flow_status)
        if status not in COMMON_FLOW and status not in _VERIFIABLE_HOLDS:
            raise TransitionNotAllowed(
                {"status": [f"Cannot verify a shipment in status {self.status}"]},
                code="sequence",
            )

    def record_warehouse_verification(
        self,
        verified_by: str,
        mode: TransportMode,
        normalized: NormalizedPackages,
        calculated_charge_usd: float,
        final_charge_usd: float,
        pricing_source: PricingSource,
        adjustment_reason: str | None = None,
    ) -> None:
        """Replace the packages and record the priced, verified state."""
        self._assert_mode_unchanged(mode)
        self._assert_verifiable()

        now = datetime.now(UTC)
        status = ShipmentStatus.WAREHOUSE_VERIFIED_PRICED.value

        with atomic_change(self):
            for package in list(self.packages or []):
                self.remove_packages(package)
            for data in normalized.packages:
                self.add_packages(
                    Package(
                        **data,
                        restricted_override_by=verified_by if data["restricted_override_approved"] else None,
                    )
                )

            self.transport_mode = mode.value
            self.status = status
            self.customer_status = customer_status_for(status)
            self.last_flow_status = status
            self.calculated_charge_usd = calculated_charge_usd
            self.final_charge_usd = final_charge_usd
            self.pricing_source = pricing_source.value
            self.price_adjustment_reason = adjustment_reason
            self.price_calculated_at = now
            self.price_calculated_by = verified_by
            self.updated_at = now

        self.raise_(
            ShipmentVerifiedAtWarehouse(
                shipment_id=str(self.id),
                transport_mode=mode.value,
                package_count=len(normalized.packages),
                total_weight_kg=normalized.total_weight_kg,
                total_cbm=normalized.total_cbm,
                calculated_charge_usd=calculated_charge_usd,
                final_charge_usd=final_charge_usd,
                pricing_source=pricing_source.value,
                verified_by=verified_by,
                verified_at=now,
            )
        )
        self.raise_(
            ShipmentStatusChanged(
                shipment_id=str(self.id),
                status=status,
                actor_id=verified_by,
                occurred_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Status advancement
    # -------------------------------------------------------------------
    def advance_status(self, target_status, actor_id: str, expected_current_status=None) -> None:
        """Move to ``target_status`` if the transition rules allow it."""
        if expected_current_status is not None:
            try:
                expected = ShipmentStatus(expected_current_status).value
            except ValueError:
                raise InvalidInput(
                    {"expected_current_status": [f"Unknown status: {expected_current_status}"]}
                ) from None
            if expected != self.status:
                raise TransitionNotAllowed(
                    {"status": [f"Shipment is {self.status}, expected {expected}"]},
                    code="stale_status",
                )

        validate_transition(
            self.transport_mode,
            self.status,
            target_status,
            payment_status=self.payment_collection_status,
        )

        now = datetime.now(UTC)
        status = ShipmentStatus(target_status).value
        with atomic_change(self):
            self.status = status
            self.customer_status = customer_status_for(status)
            if not is_exception_status(status):
                self.last_flow_status = status
            self.updated_at = now

        self.raise_(
            ShipmentStatusChanged(
                shipment_id=str(self.id),
                status=status,
                actor_id=actor_id,
                occurred_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Payment collection
    # -------------------------------------------------------------------
    def update_payment_collection_status(self, payment_status) -> None:
        """Record payment progress; READY_FOR_PICKUP is gated on PAID_IN_FULL."""
        try:
            new_status = PaymentCollectionStatus(payment_status).value
        except ValueError:
            raise InvalidInput(
                {"payment_collection_status": [f"Unknown payment collection status: {payment_status}"]}
            ) from None

        if new_status == self.payment_collection_status:
            return

        now = datetime.now(UTC)
        self.payment_collection_status = new_status
        self.updated_at = now
        self.raise_(
            PaymentCollectionStatusChanged(
                shipment_id=str(self.id),
                payment_collection_status=new_status,
                changed_at=now,
            )
        )
