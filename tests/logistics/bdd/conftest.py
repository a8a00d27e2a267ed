"""Shared BDD fixtures and step definitions for the shipment lifecycle."""

import pytest
from logistics.errors import TransitionNotAllowed
from pytest_bdd import given, parsers, then

_VERIFY_PACKAGES = {
    "air": [{"description": "Carton", "weight_kg": 10}],
    "ocean": [{"description": "Crate", "cbm": 2}],
}


@pytest.fixture()
def error():
    """Container for captured transition errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a shipment booked as "{shipment_type}" by "{sender_id}"'),
    target_fixture="shipment",
)
def booked_shipment(lifecycle, shipment_type, sender_id):
    return lifecycle.register_shipment(sender_id=sender_id, shipment_type=shipment_type, created_by=sender_id)


@given(
    parsers.cfparse('a verified "{shipment_type}" shipment for "{sender_id}"'),
    target_fixture="shipment",
)
def verified_shipment(lifecycle, sink, shipment_type, sender_id):
    shipment = lifecycle.register_shipment(sender_id=sender_id, shipment_type=shipment_type)
    shipment = lifecycle.verify_at_warehouse(
        shipment.id,
        verified_by="staff-bdd",
        packages=_VERIFY_PACKAGES[shipment_type],
    )
    sink.reset()
    return shipment


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the shipment status is "{status}"'))
def shipment_status_is(shipment, status):
    assert shipment.status == status
    assert shipment.customer_status == status


@then(parsers.cfparse('a "{status}" notification is sent'))
def notification_sent(sink, status):
    assert status in sink.statuses(), f"Notified statuses: {sink.statuses()}"


@then(parsers.cfparse('the transition is rejected with "{code}"'))
def transition_rejected(error, code):
    assert isinstance(error["exc"], TransitionNotAllowed), f"Expected a rejected transition, got {error['exc']!r}"
    assert error["exc"].code == code
