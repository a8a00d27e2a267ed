"""Tests for the Shipment aggregate: registration, verification, status and payment."""

import pytest
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
from logistics.shipment.packages import normalize_packages
from logistics.shipment.shipment import Shipment
from protean.exceptions import ValidationError


def _make_shipment(shipment_type="air", legacy_weight_kg=None):
    return Shipment.register(
        sender_id="cust-001",
        recipient_contact="+2348012345678",
        shipment_type=shipment_type,
        legacy_weight_kg=legacy_weight_kg,
        created_by="staff-001",
    )


def _verify(shipment, mode=TransportMode.AIR, packages=None, charge=1270.75):
    normalized = normalize_packages(packages or [{"weight_kg": 110.5}])
    shipment.record_warehouse_verification(
        verified_by="staff-002",
        mode=mode,
        normalized=normalized,
        calculated_charge_usd=charge,
        final_charge_usd=charge,
        pricing_source=PricingSource.DEFAULT_RATE,
    )
    return shipment


def _events_of(shipment, event_cls):
    return [e for e in shipment._events if isinstance(e, event_cls)]


class TestRegistration:
    def test_starts_at_preorder_submitted(self):
        shipment = _make_shipment()
        assert shipment.status == ShipmentStatus.PREORDER_SUBMITTED.value
        assert shipment.customer_status == ShipmentStatus.PREORDER_SUBMITTED.value

    def test_transport_mode_unset_until_verification(self):
        shipment = _make_shipment()
        assert shipment.transport_mode is None
        assert shipment.requested_mode == TransportMode.AIR.value

    def test_ocean_booking_hints_sea(self):
        assert _make_shipment("ocean").requested_mode == TransportMode.SEA.value

    def test_road_booking_has_no_hint(self):
        assert _make_shipment("road").requested_mode is None

    def test_starts_unpaid(self):
        assert _make_shipment().payment_collection_status == PaymentCollectionStatus.UNPAID.value

    def test_tracking_number_generated(self):
        assert _make_shipment().tracking_number.startswith("GEX-")

    def test_raises_registered_and_initial_status_events(self):
        shipment = _make_shipment()
        assert len(_events_of(shipment, ShipmentRegistered)) == 1
        status_events = _events_of(shipment, ShipmentStatusChanged)
        assert len(status_events) == 1
        assert status_events[0].status == ShipmentStatus.PREORDER_SUBMITTED.value
        assert status_events[0].actor_id == "staff-001"


class TestWarehouseVerification:
    def test_records_priced_state(self):
        shipment = _verify(_make_shipment())
        assert shipment.status == ShipmentStatus.WAREHOUSE_VERIFIED_PRICED.value
        assert shipment.customer_status == ShipmentStatus.WAREHOUSE_VERIFIED_PRICED.value
        assert shipment.transport_mode == TransportMode.AIR.value
        assert shipment.final_charge_usd == 1270.75
        assert shipment.pricing_source == PricingSource.DEFAULT_RATE.value
        assert shipment.price_calculated_by == "staff-002"
        assert shipment.price_calculated_at is not None

    def test_adds_packages(self):
        shipment = _verify(_make_shipment(), packages=[{"weight_kg": 60}, {"weight_kg": 50.5}])
        assert len(shipment.packages) == 2

    def test_reverification_replaces_packages(self):
        shipment = _verify(_make_shipment(), packages=[{"weight_kg": 60}, {"weight_kg": 50.5}])
        _verify(shipment, packages=[{"weight_kg": 110.5}])
        assert len(shipment.packages) == 1
        assert shipment.packages[0].weight_kg == 110.5

    def test_override_approver_recorded(self):
        shipment = _verify(
            _make_shipment(),
            packages=[
                {
                    "weight_kg": 10,
                    "is_restricted": True,
                    "restricted_override_approved": True,
                    "restricted_override_reason": "Documents checked",
                },
                {"weight_kg": 5},
            ],
        )
        by_weight = {p.weight_kg: p for p in shipment.packages}
        assert by_weight[10].restricted_override_by == "staff-002"
        assert by_weight[5].restricted_override_by is None

    def test_transport_mode_cannot_change(self):
        shipment = _verify(_make_shipment())
        with pytest.raises(InvalidInput) as exc:
            _verify(shipment, mode=TransportMode.SEA, packages=[{"cbm": 1}], charge=550)
        assert "transport_mode" in exc.value.messages
        assert shipment.transport_mode == TransportMode.AIR.value

    def test_cannot_verify_after_departure(self):
        shipment = _verify(_make_shipment())
        shipment.advance_status(ShipmentStatus.FLIGHT_DEPARTED, actor_id="staff-003")
        with pytest.raises(TransitionNotAllowed):
            _verify(shipment)

    def test_held_before_departure_can_be_reverified(self):
        shipment = _verify(_make_shipment())
        shipment.advance_status(ShipmentStatus.ON_HOLD, actor_id="staff-003")
        _verify(shipment, packages=[{"weight_kg": 100}], charge=1350.0)
        assert shipment.status == ShipmentStatus.WAREHOUSE_VERIFIED_PRICED.value
        assert shipment.final_charge_usd == 1350.0

    def test_held_after_departure_cannot_be_reverified(self):
        shipment = _verify(_make_shipment())
        shipment.advance_status(ShipmentStatus.FLIGHT_DEPARTED, actor_id="staff-003")
        shipment.advance_status(ShipmentStatus.ON_HOLD, actor_id="staff-003")
        with pytest.raises(TransitionNotAllowed) as exc:
            _verify(shipment, packages=[{"weight_kg": 100}], charge=1350.0)
        assert exc.value.code == "sequence"
        assert shipment.status == ShipmentStatus.ON_HOLD.value
        assert shipment.final_charge_usd == 1270.75

    def test_hold_remembers_last_ladder_status(self):
        shipment = _verify(_make_shipment())
        shipment.advance_status(ShipmentStatus.BOARDED_ON_FLIGHT, actor_id="staff-003")
        shipment.advance_status(ShipmentStatus.ON_HOLD, actor_id="staff-003")
        assert shipment.last_flow_status == ShipmentStatus.BOARDED_ON_FLIGHT.value

    def test_raises_verification_and_status_events(self):
        shipment = _verify(_make_shipment())
        verified = _events_of(shipment, ShipmentVerifiedAtWarehouse)
        assert len(verified) == 1
        assert verified[0].package_count == 1
        assert verified[0].total_weight_kg == 110.5
        status_events = _events_of(shipment, ShipmentStatusChanged)
        assert status_events[-1].status == ShipmentStatus.WAREHOUSE_VERIFIED_PRICED.value
        assert status_events[-1].actor_id == "staff-002"


class TestAdvanceStatus:
    def test_forward_jump(self):
        shipment = _verify(_make_shipment())
        shipment.advance_status(ShipmentStatus.FLIGHT_DEPARTED, actor_id="staff-003")
        assert shipment.status == ShipmentStatus.FLIGHT_DEPARTED.value
        assert shipment.customer_status == ShipmentStatus.FLIGHT_DEPARTED.value

    def test_backward_move_leaves_status_untouched(self):
        shipment = _verify(_make_shipment())
        shipment.advance_status(ShipmentStatus.FLIGHT_DEPARTED, actor_id="staff-003")
        with pytest.raises(TransitionNotAllowed):
            shipment.advance_status(ShipmentStatus.AT_ORIGIN_AIRPORT, actor_id="staff-003")
        assert shipment.status == ShipmentStatus.FLIGHT_DEPARTED.value

    def test_mode_dependent_status_before_verification(self):
        shipment = _make_shipment()
        with pytest.raises(TransitionNotAllowed) as exc:
            shipment.advance_status(ShipmentStatus.DISPATCHED_TO_ORIGIN_AIRPORT, actor_id="staff-003")
        assert exc.value.code == "mode_unknown"

    def test_verified_priced_refused(self):
        shipment = _make_shipment()
        with pytest.raises(TransitionNotAllowed) as exc:
            shipment.advance_status(ShipmentStatus.WAREHOUSE_VERIFIED_PRICED, actor_id="staff-003")
        assert exc.value.code == "verification_required"

    def test_payment_gate(self):
        shipment = _verify(_make_shipment())
        shipment.advance_status(ShipmentStatus.IN_TRANSIT_TO_LAGOS_OFFICE, actor_id="staff-003")
        with pytest.raises(TransitionNotAllowed) as exc:
            shipment.advance_status(ShipmentStatus.READY_FOR_PICKUP, actor_id="staff-003")
        assert exc.value.code == "payment_required"

        shipment.update_payment_collection_status(PaymentCollectionStatus.PAID_IN_FULL)
        shipment.advance_status(ShipmentStatus.READY_FOR_PICKUP, actor_id="staff-003")
        assert shipment.status == ShipmentStatus.READY_FOR_PICKUP.value

    def test_on_hold_from_anywhere(self):
        shipment = _make_shipment()
        shipment.advance_status(ShipmentStatus.ON_HOLD, actor_id="staff-003")
        assert shipment.status == ShipmentStatus.ON_HOLD.value

    def test_stale_expected_status(self):
        shipment = _verify(_make_shipment())
        with pytest.raises(TransitionNotAllowed) as exc:
            shipment.advance_status(
                ShipmentStatus.FLIGHT_DEPARTED,
                actor_id="staff-003",
                expected_current_status=ShipmentStatus.WAREHOUSE_RECEIVED,
            )
        assert exc.value.code == "stale_status"

    def test_matching_expected_status(self):
        shipment = _verify(_make_shipment())
        shipment.advance_status(
            "BOARDED_ON_FLIGHT",
            actor_id="staff-003",
            expected_current_status="WAREHOUSE_VERIFIED_PRICED",
        )
        assert shipment.status == ShipmentStatus.BOARDED_ON_FLIGHT.value

    def test_raises_status_changed_event(self):
        shipment = _verify(_make_shipment())
        shipment.advance_status(ShipmentStatus.AT_ORIGIN_AIRPORT, actor_id="staff-003")
        event = _events_of(shipment, ShipmentStatusChanged)[-1]
        assert event.status == ShipmentStatus.AT_ORIGIN_AIRPORT.value
        assert event.actor_id == "staff-003"
        assert event.shipment_id == str(shipment.id)


class TestPaymentCollection:
    def test_update(self):
        shipment = _make_shipment()
        shipment.update_payment_collection_status("PAYMENT_IN_PROGRESS")
        assert shipment.payment_collection_status == PaymentCollectionStatus.PAYMENT_IN_PROGRESS.value
        assert len(_events_of(shipment, PaymentCollectionStatusChanged)) == 1

    def test_same_status_raises_no_event(self):
        shipment = _make_shipment()
        shipment.update_payment_collection_status(PaymentCollectionStatus.UNPAID)
        assert _events_of(shipment, PaymentCollectionStatusChanged) == []

    def test_unknown_status(self):
        with pytest.raises(InvalidInput):
            _make_shipment().update_payment_collection_status("REFUNDED")


class TestInvariants:
    def test_customer_status_cannot_drift(self):
        shipment = _make_shipment()
        with pytest.raises(ValidationError):
            shipment.customer_status = ShipmentStatus.CANCELLED.value
