"""Shipment status timeline — append-only log of every status a shipment entered."""

import uuid

from protean.core.projector import on
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from logistics.domain import logistics
from logistics.shipment.events import ShipmentStatusChanged
from logistics.shipment.labels import status_label
from logistics.shipment.shipment import Shipment


@logistics.projection
class ShipmentStatusTimeline:
    entry_id = Identifier(identifier=True, required=True)
    shipment_id = Identifier(required=True)
    status = String(required=True, max_length=50)
    label = String(required=True, max_length=100)
    actor_id = Identifier()
    occurred_at = DateTime(required=True)


@logistics.projector(projector_for=ShipmentStatusTimeline, aggregates=[Shipment])
class ShipmentStatusTimelineProjector:
    @on(ShipmentStatusChanged)
    def on_status_changed(self, event):
        current_domain.repository_for(ShipmentStatusTimeline).add(
            ShipmentStatusTimeline(
                entry_id=str(uuid.uuid4()),
                shipment_id=event.shipment_id,
                status=event.status,
                label=status_label(event.status),
                actor_id=event.actor_id,
                occurred_at=event.occurred_at,
            )
        )
