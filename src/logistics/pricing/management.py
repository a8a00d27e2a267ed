"""Commands and handlers for maintaining default rules and customer overrides."""

from datetime import UTC, datetime

import structlog
from protean import atomic_change, handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from logistics.domain import logistics
from logistics.errors import InvalidInput
from logistics.pricing.rules import CustomerPricingOverride, PricingRule
from logistics.shipment.enums import TransportMode

logger = structlog.get_logger(__name__)

_RULE_FIELDS = (
    "name",
    "mode",
    "min_weight_kg",
    "max_weight_kg",
    "rate_usd_per_kg",
    "flat_rate_usd_per_cbm",
    "effective_from",
    "effective_to",
)

_OVERRIDE_FIELDS = (
    "mode",
    "min_weight_kg",
    "max_weight_kg",
    "rate_usd_per_kg",
    "flat_rate_usd_per_cbm",
    "starts_at",
    "ends_at",
    "notes",
)


@logistics.command(part_of="PricingRule")
class CreatePricingRule:
    name = String(required=True, max_length=255)
    mode = String(required=True, choices=TransportMode)
    min_weight_kg = Float()
    max_weight_kg = Float()
    rate_usd_per_kg = Float()
    flat_rate_usd_per_cbm = Float()
    effective_from = DateTime()
    effective_to = DateTime()
    created_by = Identifier(required=True)


@logistics.command(part_of="PricingRule")
class UpdatePricingRule:
    """Replace every editable field of a rule.

    Omitted bounds and window ends are cleared, which reopens the band or
    window; ``is_active`` reactivates or retires the rule.
    """

    rule_id = Identifier(required=True)
    updated_by = Identifier(required=True)
    name = String(required=True, max_length=255)
    mode = String(required=True, choices=TransportMode)
    min_weight_kg = Float()
    max_weight_kg = Float()
    rate_usd_per_kg = Float()
    flat_rate_usd_per_cbm = Float()
    effective_from = DateTime()
    effective_to = DateTime()
    is_active = Boolean(default=True)


@logistics.command(part_of="PricingRule")
class DeactivatePricingRule:
    rule_id = Identifier(required=True)
    updated_by = Identifier(required=True)


@logistics.command(part_of="CustomerPricingOverride")
class CreateCustomerPricingOverride:
    customer_id = Identifier(required=True)
    mode = String(required=True, choices=TransportMode)
    min_weight_kg = Float()
    max_weight_kg = Float()
    rate_usd_per_kg = Float()
    flat_rate_usd_per_cbm = Float()
    starts_at = DateTime()
    ends_at = DateTime()
    notes = Text()
    created_by = Identifier(required=True)


@logistics.command(part_of="CustomerPricingOverride")
class UpdateCustomerPricingOverride:
    """Replace every editable field of an override, as UpdatePricingRule does for rules."""

    override_id = Identifier(required=True)
    updated_by = Identifier(required=True)
    mode = String(required=True, choices=TransportMode)
    min_weight_kg = Float()
    max_weight_kg = Float()
    rate_usd_per_kg = Float()
    flat_rate_usd_per_cbm = Float()
    starts_at = DateTime()
    ends_at = DateTime()
    notes = Text()
    is_active = Boolean(default=True)


@logistics.command(part_of="CustomerPricingOverride")
class DeactivateCustomerPricingOverride:
    override_id = Identifier(required=True)
    updated_by = Identifier(required=True)


def _replace(aggregate, command, field_names) -> None:
    """Overwrite ``field_names`` from ``command``; unset values clear the field."""
    try:
        with atomic_change(aggregate):
            for field_name in field_names:
                setattr(aggregate, field_name, getattr(command, field_name))
            aggregate.is_active = bool(command.is_active)
            aggregate.updated_by = command.updated_by
            aggregate.updated_at = datetime.now(UTC)
    except ValidationError as exc:
        raise InvalidInput(exc.messages) from exc


@logistics.command_handler(part_of=PricingRule)
class PricingRuleCommandHandler:
    @handle(CreatePricingRule)
    def create_pricing_rule(self, command):
        now = datetime.now(UTC)
        try:
            rule = PricingRule(
                **{f: getattr(command, f) for f in _RULE_FIELDS},
                is_active=True,
                created_by=command.created_by,
                created_at=now,
                updated_at=now,
            )
        except ValidationError as exc:
            raise InvalidInput(exc.messages) from exc

        current_domain.repository_for(PricingRule).add(rule)
        logger.info("Pricing rule created", rule_id=str(rule.id), mode=rule.mode)
        return str(rule.id)

    @handle(UpdatePricingRule)
    def update_pricing_rule(self, command):
        repo = current_domain.repository_for(PricingRule)
        rule = repo.get(command.rule_id)
        _replace(rule, command, _RULE_FIELDS)
        repo.add(rule)
        logger.info("Pricing rule updated", rule_id=str(rule.id), is_active=rule.is_active)

    @handle(DeactivatePricingRule)
    def deactivate_pricing_rule(self, command):
        repo = current_domain.repository_for(PricingRule)
        rule = repo.get(command.rule_id)
        rule.deactivate(command.updated_by)
        repo.add(rule)
        logger.info("Pricing rule deactivated", rule_id=str(rule.id))


@logistics.command_handler(part_of=CustomerPricingOverride)
class CustomerPricingOverrideCommandHandler:
    @handle(CreateCustomerPricingOverride)
    def create_override(self, command):
        now = datetime.now(UTC)
        try:
            override = CustomerPricingOverride(
                **{f: getattr(command, f) for f in _OVERRIDE_FIELDS},
                customer_id=command.customer_id,
                is_active=True,
                created_by=command.created_by,
                created_at=now,
                updated_at=now,
            )
        except ValidationError as exc:
            raise InvalidInput(exc.messages) from exc

        current_domain.repository_for(CustomerPricingOverride).add(override)
        logger.info(
            "Customer pricing override created",
            override_id=str(override.id),
            customer_id=str(override.customer_id),
            mode=override.mode,
        )
        return str(override.id)

    @handle(UpdateCustomerPricingOverride)
    def update_override(self, command):
        repo = current_domain.repository_for(CustomerPricingOverride)
        override = repo.get(command.override_id)
        _replace(override, command, _OVERRIDE_FIELDS)
        repo.add(override)
        logger.info("Customer pricing override updated", override_id=str(override.id), is_active=override.is_active)

    @handle(DeactivateCustomerPricingOverride)
    def deactivate_override(self, command):
        repo = current_domain.repository_for(CustomerPricingOverride)
        override = repo.get(command.override_id)
        override.deactivate(command.updated_by)
        repo.add(override)
        logger.info("Customer pricing override deactivated", override_id=str(override.id))
