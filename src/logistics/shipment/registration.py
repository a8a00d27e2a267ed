"""Shipment registration: command and handler."""

from protean import handle
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from logistics.domain import logistics
from logistics.shipment.shipment import Shipment


@logistics.command(part_of="Shipment")
class RegisterShipment:
    """Book a shipment; ``shipment_type`` (air/ocean/road) hints at the transport mode."""

    sender_id = Identifier(required=True)
    recipient_contact = String(max_length=255)
    shipment_type = String(max_length=20)
    legacy_weight_kg = Float(min_value=0)
    created_by = Identifier()


@logistics.command_handler(part_of=Shipment)
class RegisterShipmentHandler:
    @handle(RegisterShipment)
    def register_shipment(self, command):
        shipment = Shipment.register(
            sender_id=command.sender_id,
            recipient_contact=command.recipient_contact,
            shipment_type=command.shipment_type,
            legacy_weight_kg=command.legacy_weight_kg,
            created_by=command.created_by,
        )
        current_domain.repository_for(Shipment).add(shipment)
        return str(shipment.id)
