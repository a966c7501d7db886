from typing import Dict, List, Literal, Optional, Set

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from form_builder.errors import FieldConfigurationError

FieldType = Literal[
    "name",
    "text",
    "textarea",
    "number",
    "email",
    "phone",
    "address",
    "multiemail",
    "select",
    "multiselect",
    "checkbox",
    "radio",
    "radioInput",
    "boolean",
]

# system: can't be deleted or hidden, name can't be edited, can't be marked optional
# system-but-optional: can't be deleted, name can't be edited, may be hidden or optional
# user: fully editable
# user-readonly: every field is read only
Editable = Literal["system", "system-but-optional", "user", "user-readonly"]

OptionsInputType = Literal["address", "phone", "text"]


class CamelModel(BaseModel):
    """Stored field definitions are camelCase JSON; attributes are snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FieldOption(CamelModel):
    label: str
    value: str


class OptionsInput(CamelModel):
    type: OptionsInputType
    required: Optional[bool] = None
    placeholder: Optional[str] = None


class FieldView(CamelModel):
    id: str
    label: str
    description: Optional[str] = None


class FieldSource(CamelModel):
    # For workflow sources the id is the workflow id.
    id: str
    type: str
    label: str
    edit_url: Optional[str] = None
    field_required: Optional[bool] = None


class SubField(CamelModel):
    name: str
    type: FieldType
    label: Optional[str] = None
    placeholder: Optional[str] = None
    required: bool = False


class Variant(CamelModel):
    fields: List[SubField] = Field(default_factory=list)


class VariantsConfig(CamelModel):
    variants: Dict[str, Variant] = Field(default_factory=dict)


class FieldSchema(CamelModel):
    name: str
    type: FieldType
    label: Optional[str] = None
    # Defaults are filled from the type config so that changing them in code
    # reaches existing fields that never overrode them.
    default_label: Optional[str] = None
    placeholder: Optional[str] = None
    default_placeholder: Optional[str] = None
    required: bool = False
    options: Optional[List[FieldOption]] = None
    # Options live at dataStore[get_options_at] instead of inline.
    get_options_at: Optional[str] = None
    # radioInput: follow-up input keyed by the selected option value.
    options_inputs: Optional[Dict[str, OptionsInput]] = None
    variant: Optional[str] = None
    variants_config: Optional[VariantsConfig] = None
    views: Optional[List[FieldView]] = None
    hide_when_just_one_option: bool = False
    hidden: Optional[bool] = None
    editable: Editable = "user"
    sources: List[FieldSource] = Field(default_factory=list)

    @property
    def effective_label(self) -> Optional[str]:
        return self.label or self.default_label

    @property
    def effective_placeholder(self) -> Optional[str]:
        return self.placeholder or self.default_placeholder


def ensure_unique_names(fields: List[FieldSchema]) -> None:
    seen: Set[str] = set()
    for field in fields:
        if field.name in seen:
            raise FieldConfigurationError(f"Duplicate field name: {field.name}")
        seen.add(field.name)
