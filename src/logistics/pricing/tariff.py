"""Built-in tariff and the rate-picking rules shared by defaults and overrides.

The tariff is the last resort of the resolver and never fails for missing
configuration: any positive weight lands in some air tier and every volume
prices at the flat sea rate.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AirTier:
    min_kg: float
    max_kg: float | None
    usd_per_kg: float


DEFAULT_AIR_TIERS: tuple[AirTier, ...] = (
    AirTier(min_kg=1, max_kg=100, usd_per_kg=13.5),
    AirTier(min_kg=101, max_kg=300, usd_per_kg=11.5),
    AirTier(min_kg=301, max_kg=600, usd_per_kg=10.8),
    AirTier(min_kg=601, max_kg=1000, usd_per_kg=10.5),
    AirTier(min_kg=1001, max_kg=1500, usd_per_kg=10.0),
    AirTier(min_kg=1501, max_kg=None, usd_per_kg=9.8),
)

DEFAULT_SEA_USD_PER_CBM = 550.0


def tariff_air_tier(weight_kg: float, tiers: tuple[AirTier, ...] = DEFAULT_AIR_TIERS) -> AirTier:
    """The tier with the highest minimum not above ``weight_kg``.

    Weights between published bands (100.5 kg) stay in the lower band and
    weights under the first minimum use the first tier.
    """
    ordered = sorted(tiers, key=lambda t: t.min_kg)
    chosen = ordered[0]
    for tier in ordered:
        if tier.min_kg <= weight_kg:
            chosen = tier
    return chosen


def tariff_air_rate(weight_kg: float) -> float:
    return tariff_air_tier(weight_kg).usd_per_kg


def tariff_sea_rate() -> float:
    return DEFAULT_SEA_USD_PER_CBM


def _in_band(weight_kg: float, min_kg: float | None, max_kg: float | None) -> bool:
    if min_kg is not None and weight_kg < min_kg:
        return False
    if max_kg is not None and weight_kg > max_kg:
        return False
    return True


def pick_air_rate_from_rules(weight_kg: float, rules) -> float | None:
    """Rate of the rule whose band holds ``weight_kg`` with the highest minimum.

    An open lower bound ranks below every explicit minimum. Rules without a
    rate are ignored.
    """
    candidates = [
        rule
        for rule in rules
        if rule.rate_usd_per_kg is not None and _in_band(weight_kg, rule.min_weight_kg, rule.max_weight_kg)
    ]
    if not candidates:
        return None
    best = max(
        candidates,
        key=lambda r: r.min_weight_kg if r.min_weight_kg is not None else float("-inf"),
    )
    return best.rate_usd_per_kg


def pick_sea_rate_from_rules(rules) -> float | None:
    """First positive flat rate; ``rules`` arrive newest first."""
    for rule in rules:
        if rule.flat_rate_usd_per_cbm is not None and rule.flat_rate_usd_per_cbm > 0:
            return rule.flat_rate_usd_per_cbm
    return None
