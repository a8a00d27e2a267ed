"""Payment collection updates.

Only the collection status is tracked here; it feeds the READY_FOR_PICKUP
payment gate.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from logistics.domain import logistics
from logistics.shipment.shipment import Shipment


@logistics.command(part_of="Shipment")
class UpdatePaymentCollectionStatus:
    shipment_id = Identifier(required=True)
    payment_collection_status = String(required=True, max_length=30)


@logistics.command_handler(part_of=Shipment)
class UpdatePaymentCollectionStatusHandler:
    @handle(UpdatePaymentCollectionStatus)
    def update_payment_collection_status(self, command):
        repo = current_domain.repository_for(Shipment)
        shipment = repo.get(command.shipment_id)
        shipment.update_payment_collection_status(command.payment_collection_status)
        repo.add(shipment)
