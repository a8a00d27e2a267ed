"""Rate table resolver — finds the unit rate for a shipment.

Resolution order:
    1. The customer's active overrides (skipped without a customer id)
    2. Active default pricing rules
    3. The built-in tariff

A store that cannot be read is treated as holding no rules, so pricing
degrades to the next source instead of failing.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

import structlog
from protean.utils.globals import current_domain

from logistics.errors import InvalidInput
from logistics.pricing.rules import CustomerPricingOverride, PricingRule
from logistics.pricing.tariff import (
    pick_air_rate_from_rules,
    pick_sea_rate_from_rules,
    tariff_air_rate,
    tariff_sea_rate,
)
from logistics.shipment.enums import PricingSource, TransportMode

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ResolvedRate:
    """The unit rate to charge and where it came from."""

    unit_rate: float
    pricing_source: PricingSource
    used_fallback: bool = False


def billable_for(mode: TransportMode, weight_kg: float | None, cbm: float | None) -> float:
    """The positive quantity ``mode`` prices on; ``InvalidInput`` otherwise."""
    if mode == TransportMode.AIR:
        if weight_kg is None or weight_kg <= 0:
            raise InvalidInput({"weight_kg": ["Air pricing requires a positive weight"]})
        return weight_kg
    if cbm is None or cbm <= 0:
        raise InvalidInput({"cbm": ["Sea pricing requires a positive cbm"]})
    return cbm


def _pick(mode: TransportMode, quantity: float, rules) -> float | None:
    if mode == TransportMode.AIR:
        return pick_air_rate_from_rules(quantity, rules)
    return pick_sea_rate_from_rules(rules)


def _load(source: str, loader) -> list:
    try:
        return loader()
    except Exception as exc:
        logger.warning("Pricing source degraded, continuing without it", source=source, error=str(exc))
        return []


def tariff_rate(mode, weight_kg: float | None = None, cbm: float | None = None) -> ResolvedRate:
    """Rate from the built-in tariff alone."""
    mode = TransportMode(mode)
    quantity = billable_for(mode, weight_kg, cbm)
    rate = tariff_air_rate(quantity) if mode == TransportMode.AIR else tariff_sea_rate()
    return ResolvedRate(unit_rate=rate, pricing_source=PricingSource.DEFAULT_RATE, used_fallback=True)


def resolve_rate(
    customer_id: str | None,
    mode,
    weight_kg: float | None = None,
    cbm: float | None = None,
    at: datetime | None = None,
) -> ResolvedRate:
    mode = TransportMode(mode)
    quantity = billable_for(mode, weight_kg, cbm)
    at = at or datetime.now(UTC)

    if customer_id:
        overrides = _load(
            "customer_overrides",
            lambda: current_domain.repository_for(CustomerPricingOverride).active_for(customer_id, mode, at),
        )
        rate = _pick(mode, quantity, overrides)
        if rate is not None:
            return ResolvedRate(unit_rate=rate, pricing_source=PricingSource.CUSTOMER_OVERRIDE)

    rules = _load(
        "default_rules",
        lambda: current_domain.repository_for(PricingRule).active_for(mode, at),
    )
    rate = _pick(mode, quantity, rules)
    if rate is not None:
        return ResolvedRate(unit_rate=rate, pricing_source=PricingSource.DEFAULT_RATE)

    logger.debug("No pricing rule matched, using tariff", mode=mode.value, quantity=quantity)
    return tariff_rate(mode, weight_kg=weight_kg, cbm=cbm)
