from typing import List, Optional

from pydantic import BaseModel

from form_builder.errors import FieldConfigurationError
from form_builder.field_types import FieldTypeRegistry, field_types_config_map
from form_builder.models import FieldSchema, FieldType, SubField


class ResolvedSubField(BaseModel):
    name: str
    type: FieldType
    required: bool
    label: Optional[str] = None
    placeholder: Optional[str] = None
    can_change_requirability: bool = True


def resolve_variant(
    field: FieldSchema, registry: FieldTypeRegistry = field_types_config_map
) -> Optional[str]:
    """Return the active variant: the field's own, else its type's default."""
    if field.variant:
        return field.variant
    return registry.default_variant(field.type)


def resolve_sub_fields(field: FieldSchema, variant: str) -> List[SubField]:
    if field.variants_config is None:
        raise FieldConfigurationError(f"variantsConfig must be there for the field {field.type}")
    try:
        return field.variants_config.variants[variant].fields
    except KeyError:
        raise FieldConfigurationError(
            f"variant {variant} is not in variantsConfig of the field {field.name}"
        ) from None


def ensure_variants_configured(
    field: FieldSchema, registry: FieldTypeRegistry = field_types_config_map
) -> None:
    """Raise if ``field`` belongs to a variant type but cannot resolve its sub-fields."""
    if registry.default_variant(field.type) is None and field.variants_config is None:
        return
    variant = resolve_variant(field, registry)
    if not variant:
        raise FieldConfigurationError("`variant` must be there for the field with `variantsConfig`")
    resolve_sub_fields(field, variant)


def resolve_sub_field_display(
    field: FieldSchema,
    variant: str,
    registry: FieldTypeRegistry = field_types_config_map,
) -> List[ResolvedSubField]:
    """Sub-fields of ``variant`` with labels and placeholders filled from the type config."""
    fields_map = {}
    type_config = registry.lookup(field.type)
    if type_config and type_config.variants_config:
        type_variant = type_config.variants_config.variants.get(variant)
        if type_variant:
            fields_map = type_variant.fields_map

    resolved: List[ResolvedSubField] = []
    for sub_field in resolve_sub_fields(field, variant):
        defaults = fields_map.get(sub_field.name)
        resolved.append(
            ResolvedSubField(
                name=sub_field.name,
                type=sub_field.type,
                required=sub_field.required,
                label=sub_field.label or (defaults.default_label if defaults else None),
                placeholder=sub_field.placeholder
                or (defaults.default_placeholder if defaults else None),
                can_change_requirability=defaults.can_change_requirability if defaults else True,
            )
        )
    return resolved


def with_default_variants_config(
    field: FieldSchema, registry: FieldTypeRegistry = field_types_config_map
) -> FieldSchema:
    """Seed ``variants_config`` from the type's ``defaultValue`` if the field has none."""
    if field.variants_config is not None:
        return field
    type_config = registry.lookup(field.type)
    if type_config is None or type_config.variants_config is None:
        return field
    default_value = type_config.variants_config.default_value
    if default_value is None:
        return field
    return field.model_copy(update={"variants_config": default_value.model_copy(deep=True)})
