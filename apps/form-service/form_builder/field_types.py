"""Per-type configuration shared by every field of that type.

Keeping this out of the stored field definitions lets UI-level defaults change
in code without rewriting existing booking questions.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import Field, ValidationError, model_validator

from form_builder.errors import FieldConfigurationError
from form_builder.models import CamelModel, FieldType, VariantsConfig

logger = logging.getLogger(__name__)


class VariantFieldDefaults(CamelModel):
    # Labels and placeholders are translation keys.
    default_label: Optional[str] = None
    default_placeholder: Optional[str] = None
    can_change_requirability: bool = True


class TypeVariant(CamelModel):
    label: str
    fields_map: Dict[str, VariantFieldDefaults] = Field(default_factory=dict)


class TypeVariantsConfig(CamelModel):
    default_variant: str
    # Shown as a switch instead of a select when there are exactly two variants.
    toggle_label: Optional[str] = None
    variants: Dict[str, TypeVariant]
    default_value: Optional[VariantsConfig] = None

    @model_validator(mode="after")
    def _default_variant_exists(self) -> "TypeVariantsConfig":
        if self.default_variant not in self.variants:
            raise ValueError(f"defaultVariant: {self.default_variant} is not in variants")
        return self


class FieldTypeConfig(CamelModel):
    label: str
    value: FieldType
    is_text_type: bool = False
    system_only: bool = False
    needs_options: bool = False
    variants_config: Optional[TypeVariantsConfig] = None


class FieldTypeRegistry:
    """Read-only lookup of :class:`FieldTypeConfig` by field type.

    Every entry is validated when the registry is built; a ``defaultVariant``
    missing from ``variants`` raises :class:`FieldConfigurationError` here
    instead of surfacing later during response validation.
    """

    def __init__(self, configs: Iterable[Union[FieldTypeConfig, Mapping[str, Any]]]):
        entries: Dict[str, FieldTypeConfig] = {}
        for raw in configs:
            try:
                config = FieldTypeConfig.model_validate(raw)
            except ValidationError as exc:
                raise FieldConfigurationError(f"Invalid field type config: {exc}") from exc
            if config.value in entries:
                raise FieldConfigurationError(f"Duplicate field type config: {config.value}")
            entries[config.value] = config
        self._entries = entries
        logger.debug("Loaded %d field type configs", len(entries))

    def lookup(self, field_type: str) -> Optional[FieldTypeConfig]:
        return self._entries.get(field_type)

    def __contains__(self, field_type: object) -> bool:
        return field_type in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def values(self) -> List[FieldTypeConfig]:
        return list(self._entries.values())

    def is_text_type(self, field_type: str) -> bool:
        config = self.lookup(field_type)
        return bool(config and config.is_text_type)

    def needs_options(self, field_type: str) -> bool:
        config = self.lookup(field_type)
        return bool(config and config.needs_options)

    def default_variant(self, field_type: str) -> Optional[str]:
        config = self.lookup(field_type)
        if config is None or config.variants_config is None:
            return None
        return config.variants_config.default_variant


FIELD_TYPE_CONFIGS: List[Dict[str, Any]] = [
    {
        "label": "Name",
        "value": "name",
        "isTextType": True,
        "systemOnly": True,
        "variantsConfig": {
            "toggleLabel": "split_full_name",
            "defaultVariant": "fullName",
            "variants": {
                "firstAndLastName": {
                    "label": "first_last_name",
                    "fieldsMap": {
                        "firstName": {
                            "defaultLabel": "first_name",
                            "canChangeRequirability": False,
                        },
                        "lastName": {
                            "defaultLabel": "last_name",
                            "canChangeRequirability": True,
                        },
                    },
                },
                "fullName": {
                    "label": "your_name",
                    "fieldsMap": {
                        "fullName": {
                            "defaultLabel": "your_name",
                            "defaultPlaceholder": "example_name",
                            "canChangeRequirability": False,
                        },
                    },
                },
            },
            "defaultValue": {
                "variants": {
                    "firstAndLastName": {
                        "fields": [
                            {"name": "firstName", "type": "text", "required": True},
                            {"name": "lastName", "type": "text", "required": False},
                        ],
                    },
                    "fullName": {
                        "fields": [
                            {"name": "fullName", "type": "text", "label": "your_name", "required": True},
                        ],
                    },
                },
            },
        },
    },
    {"label": "Email", "value": "email", "isTextType": True},
    {"label": "Phone", "value": "phone", "isTextType": True},
    {"label": "Address", "value": "address", "isTextType": True},
    {"label": "Short Text", "value": "text", "isTextType": True},
    {"label": "Number", "value": "number", "isTextType": True},
    {"label": "Long Text", "value": "textarea", "isTextType": True},
    {"label": "Select", "value": "select", "needsOptions": True, "isTextType": True},
    {"label": "MultiSelect", "value": "multiselect", "needsOptions": True},
    {"label": "Multiple Emails", "value": "multiemail", "isTextType": True},
    {"label": "Checkbox Group", "value": "checkbox", "needsOptions": True},
    {"label": "Radio Group", "value": "radio", "needsOptions": True},
    {"label": "Radio Input", "value": "radioInput", "systemOnly": True},
    {"label": "Checkbox", "value": "boolean"},
]

field_types_config_map = FieldTypeRegistry(FIELD_TYPE_CONFIGS)
