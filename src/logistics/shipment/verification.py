"""Warehouse verification command and handler.

The handler resolves the transport mode, normalizes the measured packages,
prices the billable quantity and records everything on the shipment in one
repository ``add``, so the package replacement and the pricing fields commit
together.
"""

import json

import structlog
from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from logistics.domain import logistics
from logistics.errors import InvalidInput
from logistics.pricing.calculator import calculate_pricing
from logistics.shipment.enums import PricingSource, TransportMode
from logistics.shipment.packages import billable_quantity, normalize_packages, resolve_mode
from logistics.shipment.shipment import Shipment

logger = structlog.get_logger(__name__)


@logistics.command(part_of="Shipment")
class VerifyShipmentAtWarehouse:
    shipment_id = Identifier(required=True)
    verified_by = Identifier(required=True)
    packages = Text(required=True)  # JSON list of raw package dicts
    transport_mode = String(max_length=10)
    manual_final_charge_usd = Float()
    manual_adjustment_reason = String(max_length=1000)


def _final_charge(calculated: float, manual_charge: float | None, reason: str | None):
    reason = (reason or "").strip() or None
    if manual_charge is None:
        return calculated, None, reason
    if reason is None:
        raise InvalidInput(
            {"manual_adjustment_reason": ["A reason is required when a manual final charge is provided."]}
        )
    return manual_charge, PricingSource.MANUAL_ADJUSTMENT, reason


def _parse_packages(value) -> list[dict]:
    try:
        packages = json.loads(value) if isinstance(value, str) else value
    except json.JSONDecodeError:
        raise InvalidInput({"packages": ["Packages must be a JSON list"]}) from None
    if not isinstance(packages, list):
        raise InvalidInput({"packages": ["Packages must be a JSON list"]})
    return packages


@logistics.command_handler(part_of=Shipment)
class VerifyShipmentAtWarehouseHandler:
    @handle(VerifyShipmentAtWarehouse)
    def verify_at_warehouse(self, command):
        repo = current_domain.repository_for(Shipment)
        shipment = repo.get(command.shipment_id)

        mode = resolve_mode(command.transport_mode, shipment.transport_mode, shipment.requested_mode)
        raw_packages = _parse_packages(command.packages)
        normalized = normalize_packages(raw_packages)
        quantity = billable_quantity(mode, normalized, shipment.legacy_weight_kg)

        pricing = calculate_pricing(
            shipment.sender_id,
            mode,
            weight_kg=quantity if mode == TransportMode.AIR else None,
            cbm=quantity if mode == TransportMode.SEA else None,
        )

        final_charge, manual_source, reason = _final_charge(
            pricing.amount_usd,
            command.manual_final_charge_usd,
            command.manual_adjustment_reason,
        )
        if final_charge <= 0:
            raise InvalidInput({"final_charge_usd": ["Final charge must be greater than zero."]})

        shipment.record_warehouse_verification(
            verified_by=command.verified_by,
            mode=mode,
            normalized=normalized,
            calculated_charge_usd=pricing.amount_usd,
            final_charge_usd=final_charge,
            pricing_source=manual_source or pricing.pricing_source,
            adjustment_reason=reason,
        )
        repo.add(shipment)

        logger.info(
            "Shipment verified at warehouse",
            shipment_id=str(shipment.id),
            transport_mode=mode.value,
            package_count=len(normalized.packages),
            final_charge_usd=final_charge,
            pricing_source=shipment.pricing_source,
        )
        return str(shipment.id)
