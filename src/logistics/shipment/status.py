"""Advance a shipment to its next status."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from logistics.domain import logistics
from logistics.shipment.shipment import Shipment


@logistics.command(part_of="Shipment")
class AdvanceShipmentStatus:
    """Move a shipment along its ladder or into an exception status.

    ``expected_current_status`` is an optional compare-and-swap guard: when
    given, the move is refused if the shipment has meanwhile moved elsewhere.
    """

    shipment_id = Identifier(required=True)
    target_status = String(required=True, max_length=50)
    actor_id = Identifier(required=True)
    expected_current_status = String(max_length=50)


@logistics.command_handler(part_of=Shipment)
class AdvanceShipmentStatusHandler:
    @handle(AdvanceShipmentStatus)
    def advance_status(self, command):
        repo = current_domain.repository_for(Shipment)
        shipment = repo.get(command.shipment_id)
        shipment.advance_status(
            command.target_status,
            actor_id=command.actor_id,
            expected_current_status=command.expected_current_status,
        )
        repo.add(shipment)
