"""Per-type preprocessing and validation of booking responses.

Responses arrive from the database or from prefill query params, so most
behaviors accept a loose input in ``preprocess`` and then check the normalized
value in ``super_refine``. Types without an entry use :data:`DEFAULT_BEHAVIOR`.
"""

import json
from typing import Any, Callable, Dict, List, Literal, NamedTuple

from pydantic import BaseModel

from form_builder.errors import FieldConfigurationError
from form_builder.field_types import field_types_config_map
from form_builder.messages import Localizer
from form_builder.models import FieldSchema, FieldType, SubField
from form_builder.variants import resolve_sub_fields, resolve_variant

SPLIT_NAME_VARIANT = "firstAndLastName"


class Issue(BaseModel):
    code: Literal["custom"] = "custom"
    message: str


class IssueSink:
    def __init__(self) -> None:
        self.issues: List[Issue] = []

    def add_issue(self, message: str) -> None:
        self.issues.append(Issue(message=message))

    def __len__(self) -> int:
        return len(self.issues)


Preprocess = Callable[[FieldSchema, Any, bool], Any]
SuperRefine = Callable[[FieldSchema, Any, bool, IssueSink, Localizer], None]


class TypeBehavior(NamedTuple):
    preprocess: Preprocess
    super_refine: SuperRefine


def _identity(field: FieldSchema, response: Any, is_partial_schema: bool) -> Any:
    return response


def _no_refinement(
    field: FieldSchema, response: Any, is_partial_schema: bool, sink: IssueSink, m: Localizer
) -> None:
    return None


DEFAULT_BEHAVIOR = TypeBehavior(preprocess=_identity, super_refine=_no_refinement)


def _is_variant_supported(sub_field: SubField) -> bool:
    return (
        field_types_config_map.is_text_type(sub_field.type)
        and field_types_config_map.default_variant(sub_field.type) is None
    )


def _preprocess_name(field: FieldSchema, response: Any, is_partial_schema: bool) -> Any:
    if resolve_variant(field) != SPLIT_NAME_VARIANT or not isinstance(response, str):
        return response

    # Prefill may send name={"firstName": "John", "lastName": "Johny Janardan"}
    try:
        parsed = json.loads(response)
    except (ValueError, RecursionError):
        parsed = None
    if isinstance(parsed, dict):
        return parsed

    # name="John Johny Janardan" fills firstName="John", lastName="Johny Janardan"
    parts = response.split()
    first_name = parts[0] if parts else ""
    return {"firstName": first_name, "lastName": " ".join(parts[1:])}


def _refine_name(
    field: FieldSchema, response: Any, is_partial_schema: bool, sink: IssueSink, m: Localizer
) -> None:
    variant = resolve_variant(field)
    if field.variants_config is None:
        raise FieldConfigurationError(f"variantsConfig must be there for the field {field.type}")
    if not variant:
        raise FieldConfigurationError("`variant` must be there for the field with `variantsConfig`")

    sub_fields = resolve_sub_fields(field, variant)
    for sub_field in sub_fields:
        if not _is_variant_supported(sub_field):
            raise FieldConfigurationError(f"Unsupported field.type with variants: {sub_field.type}")

    if len(sub_fields) == 1:
        if not isinstance(response, str):
            sink.add_issue(m("Invalid string"))
        return

    values = response if isinstance(response, dict) else {}
    for sub_field in sub_fields:
        if not sub_field.required:
            continue
        value = values.get(sub_field.name)
        if not isinstance(value, str):
            sink.add_issue(m("Invalid string"))
            continue
        if not is_partial_schema and not value:
            sink.add_issue(m("error_required_field"))


def _preprocess_boolean(field: FieldSchema, response: Any, is_partial_schema: bool) -> Any:
    if isinstance(response, str) and response.strip().lower() in ("true", "false"):
        return response.strip().lower() == "true"
    return response


def _refine_boolean(
    field: FieldSchema, response: Any, is_partial_schema: bool, sink: IssueSink, m: Localizer
) -> None:
    if not isinstance(response, bool):
        sink.add_issue(m("Invalid boolean"))


def _preprocess_multiemail(field: FieldSchema, response: Any, is_partial_schema: bool) -> Any:
    if isinstance(response, str):
        return [email.strip() for email in response.split(",") if email.strip()]
    return response


def _preprocess_multi_option(field: FieldSchema, response: Any, is_partial_schema: bool) -> Any:
    if isinstance(response, str):
        return [response] if response else []
    return response


def _refine_string_list(
    field: FieldSchema, response: Any, is_partial_schema: bool, sink: IssueSink, m: Localizer
) -> None:
    if not isinstance(response, list):
        sink.add_issue(m("Invalid array"))


def _refine_single_option(
    field: FieldSchema, response: Any, is_partial_schema: bool, sink: IssueSink, m: Localizer
) -> None:
    # Options kept at get_options_at are resolved by the caller, not here.
    if not field.options or not isinstance(response, str) or not response:
        return
    if response not in {option.value for option in field.options}:
        sink.add_issue(m("invalid_option"))


def _refine_radio_input(
    field: FieldSchema, response: Any, is_partial_schema: bool, sink: IssueSink, m: Localizer
) -> None:
    if not isinstance(response, dict) or set(response) != {"optionValue", "value"}:
        sink.add_issue(m("Invalid input"))
        return
    options_input = (field.options_inputs or {}).get(response["value"])
    if options_input is None or not options_input.required:
        return
    if not is_partial_schema and not response["optionValue"]:
        sink.add_issue(m("error_required_field"))


FIELD_TYPE_BEHAVIORS: Dict[FieldType, TypeBehavior] = {
    "name": TypeBehavior(preprocess=_preprocess_name, super_refine=_refine_name),
    "boolean": TypeBehavior(preprocess=_preprocess_boolean, super_refine=_refine_boolean),
    "multiemail": TypeBehavior(preprocess=_preprocess_multiemail, super_refine=_refine_string_list),
    "multiselect": TypeBehavior(preprocess=_preprocess_multi_option, super_refine=_refine_string_list),
    "checkbox": TypeBehavior(preprocess=_preprocess_multi_option, super_refine=_refine_string_list),
    "select": TypeBehavior(preprocess=_identity, super_refine=_refine_single_option),
    "radio": TypeBehavior(preprocess=_identity, super_refine=_refine_single_option),
    "radioInput": TypeBehavior(preprocess=_identity, super_refine=_refine_radio_input),
}


def get_behavior(field_type: str) -> TypeBehavior:
    return FIELD_TYPE_BEHAVIORS.get(field_type, DEFAULT_BEHAVIOR)
