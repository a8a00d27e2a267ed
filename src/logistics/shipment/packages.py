"""Warehouse package normalizer.

Turns the raw package measurements captured at warehouse verification into
clean package records plus the shipment totals, and derives the billable
quantity for the shipment's transport mode:

- AIR bills on total weight, falling back to the weight recorded at booking
  when no package carries a weight.
- SEA bills on total volume (cbm) with no fallback.
"""

from dataclasses import dataclass, field

from logistics.errors import InvalidInput
from logistics.shipment.enums import TransportMode
from logistics.utils.numbers import round_half_up, to_decimal, total

WEIGHT_PLACES = 3
CBM_PLACES = 6
CM3_PER_M3 = 1_000_000


@dataclass(frozen=True)
class NormalizedPackages:
    """Clean package records and their aggregate measurements."""

    packages: list[dict] = field(default_factory=list)
    total_weight_kg: float = 0.0
    total_cbm: float = 0.0


def resolve_mode(explicit=None, assigned=None, requested=None) -> TransportMode:
    """Pick the verification mode: explicit input, then the assigned mode, then the booking hint."""
    raw = explicit or assigned or requested
    if not raw:
        raise InvalidInput(
            {"transport_mode": ["Transport mode is required. Provide a transport mode or book the shipment as air/ocean."]}
        )
    try:
        return TransportMode(raw.upper() if isinstance(raw, str) else raw)
    except ValueError:
        raise InvalidInput({"transport_mode": [f"Unknown transport mode: {raw}"]}) from None


def derive_cbm(length_cm, width_cm, height_cm) -> float | None:
    """Volume in cubic metres from centimetre dimensions, if all three are positive."""
    dims = (length_cm, width_cm, height_cm)
    if any(d is None for d in dims) or any(d <= 0 for d in dims):
        return None
    volume = to_decimal(length_cm) * to_decimal(width_cm) * to_decimal(height_cm) / CM3_PER_M3
    return round_half_up(volume, CBM_PLACES)


def _positive_quantity(raw) -> int:
    quantity = 1 if raw is None else raw
    valid = isinstance(quantity, (int, float)) and not isinstance(quantity, bool) and quantity == int(quantity)
    if not valid or quantity <= 0:
        raise InvalidInput({"quantity": ["Package quantity must be a positive integer."]})
    return int(quantity)


MEASUREMENTS = ("length_cm", "width_cm", "height_cm", "weight_kg", "cbm")


def _check_measurements(raw: dict) -> None:
    for key in MEASUREMENTS:
        value = raw.get(key)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidInput({key: [f"Package {key} must be a number."]})
        if value < 0:
            raise InvalidInput({key: [f"Package {key} cannot be negative."]})


def _normalize_one(raw: dict) -> dict:
    quantity = _positive_quantity(raw.get("quantity"))
    _check_measurements(raw)

    cbm = raw.get("cbm")
    if cbm is None:
        cbm = derive_cbm(raw.get("length_cm"), raw.get("width_cm"), raw.get("height_cm"))

    approved = bool(raw.get("restricted_override_approved", False))
    reason = (raw.get("restricted_override_reason") or "").strip()
    if approved and not reason:
        raise InvalidInput(
            {"restricted_override_reason": ["A reason is required when a restricted override is approved."]}
        )
    if reason and not approved:
        raise InvalidInput(
            {"restricted_override_approved": ["An override reason was given but the override is not approved."]}
        )

    return {
        "description": raw.get("description"),
        "item_type": raw.get("item_type"),
        "quantity": quantity,
        "length_cm": raw.get("length_cm"),
        "width_cm": raw.get("width_cm"),
        "height_cm": raw.get("height_cm"),
        "weight_kg": raw.get("weight_kg"),
        "cbm": cbm,
        "is_restricted": bool(raw.get("is_restricted", False)),
        "restricted_reason": raw.get("restricted_reason"),
        "restricted_override_approved": approved,
        "restricted_override_reason": reason or None,
    }


def normalize_packages(raw_packages: list[dict]) -> NormalizedPackages:
    if not raw_packages:
        raise InvalidInput({"packages": ["At least one package is required for warehouse verification."]})

    if any(not isinstance(raw, dict) for raw in raw_packages):
        raise InvalidInput({"packages": ["Each package must be an object"]})

    packages = [_normalize_one(raw) for raw in raw_packages]
    return NormalizedPackages(
        packages=packages,
        total_weight_kg=total((p["weight_kg"] for p in packages), WEIGHT_PLACES),
        total_cbm=total((p["cbm"] for p in packages), CBM_PLACES),
    )


def billable_quantity(mode, normalized: NormalizedPackages, legacy_weight_kg: float | None = None) -> float:
    """Weight (AIR) or volume (SEA) the shipment is charged on."""
    mode = TransportMode(mode)
    if mode == TransportMode.AIR:
        billable = normalized.total_weight_kg
        if billable <= 0 and legacy_weight_kg is not None and legacy_weight_kg > 0:
            billable = legacy_weight_kg
        if billable <= 0:
            raise InvalidInput(
                {"weight_kg": ["Air verification requires positive weight (package weight or booking weight)."]}
            )
        return billable

    if normalized.total_cbm <= 0:
        raise InvalidInput({"cbm": ["Sea verification requires positive cbm (direct or derived from dimensions)."]})
    return normalized.total_cbm
