"""Charge = billable quantity x unit rate, rounded to cents."""

from dataclasses import dataclass
from datetime import datetime

from logistics.pricing.resolver import billable_for, resolve_rate, tariff_rate
from logistics.shipment.enums import PricingSource, TransportMode
from logistics.utils.numbers import multiply


@dataclass(frozen=True)
class PricingResult:
    amount_usd: float
    mode: TransportMode
    pricing_source: PricingSource


def _price(mode: TransportMode, weight_kg, cbm, resolved) -> PricingResult:
    quantity = billable_for(mode, weight_kg, cbm)
    return PricingResult(
        amount_usd=multiply(quantity, resolved.unit_rate, places=2),
        mode=mode,
        pricing_source=resolved.pricing_source,
    )


def calculate_default_pricing(mode, weight_kg: float | None = None, cbm: float | None = None) -> PricingResult:
    """Price against the built-in tariff only."""
    mode = TransportMode(mode)
    return _price(mode, weight_kg, cbm, tariff_rate(mode, weight_kg=weight_kg, cbm=cbm))


def calculate_pricing(
    customer_id: str | None,
    mode,
    weight_kg: float | None = None,
    cbm: float | None = None,
    at: datetime | None = None,
) -> PricingResult:
    """Price with the customer's overrides, then default rules, then the tariff."""
    mode = TransportMode(mode)
    resolved = resolve_rate(customer_id, mode, weight_kg=weight_kg, cbm=cbm, at=at)
    return _price(mode, weight_kg, cbm, resolved)
