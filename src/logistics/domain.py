"""Logistics bounded context: shipment lifecycle and warehouse pricing.

Tracks a consignment from pre-order through warehouse verification, the
air or sea ladder, customs and pickup. Uses CQRS: each command mutates one
aggregate inside a single unit of work, and status changes are published as
events for the timeline read model.
"""

from protean.domain import Domain

from logistics.utils.logging import configure_logging

configure_logging()

# Domain Composition Root
logistics = Domain(name="logistics")
