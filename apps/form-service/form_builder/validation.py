import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, Field

from form_builder.behaviors import Issue, IssueSink, get_behavior
from form_builder.errors import ResponseShapeError
from form_builder.messages import Localizer, get_localizer
from form_builder.models import FieldSchema, ensure_unique_names
from form_builder.responses import parse_response
from form_builder.variants import ensure_variants_configured

logger = logging.getLogger(__name__)


class FieldValidationResult(BaseModel):
    name: str
    value: Any = None
    issues: List[Issue] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.issues


class FormValidationResult(BaseModel):
    results: List[FieldValidationResult] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return all(result.success for result in self.results)

    def values(self) -> Dict[str, Any]:
        return {result.name: result.value for result in self.results if result.success}

    def issues(self) -> Dict[str, List[Issue]]:
        return {result.name: result.issues for result in self.results if not result.success}


def validate_response(
    field: FieldSchema,
    raw_response: Any,
    *,
    is_partial_schema: bool = False,
    m: Optional[Localizer] = None,
) -> FieldValidationResult:
    """Preprocess ``raw_response`` for ``field`` and validate it.

    Issues are returned in the result; a broken field definition raises
    :class:`~form_builder.errors.FieldConfigurationError` instead.
    """
    m = m or get_localizer()
    sink = IssueSink()
    ensure_variants_configured(field)

    if raw_response is None:
        if field.required and not field.hidden and not is_partial_schema:
            sink.add_issue(m("error_required_field"))
        return FieldValidationResult(name=field.name, value=None, issues=sink.issues)

    behavior = get_behavior(field.type)
    response = behavior.preprocess(field, raw_response, is_partial_schema)

    try:
        response = parse_response(response)
    except ResponseShapeError as exc:
        logger.debug("Rejected response for %s: %s", field.name, exc)
        sink.add_issue(m("Invalid input"))
        return FieldValidationResult(name=field.name, value=None, issues=sink.issues)

    behavior.super_refine(field, response, is_partial_schema, sink, m)
    return FieldValidationResult(
        name=field.name,
        value=response if not sink.issues else None,
        issues=sink.issues,
    )


def validate_responses(
    fields: Sequence[FieldSchema],
    responses: Mapping[str, Any],
    *,
    is_partial_schema: bool = False,
    m: Optional[Localizer] = None,
) -> FormValidationResult:
    ensure_unique_names(list(fields))
    m = m or get_localizer()

    unknown = [name for name in responses if name not in {field.name for field in fields}]
    if unknown:
        logger.debug("Ignoring responses without a field: %s", ", ".join(sorted(unknown)))

    results = [
        validate_response(
            field,
            responses.get(field.name),
            is_partial_schema=is_partial_schema,
            m=m,
        )
        for field in fields
    ]
    logger.debug(
        "Validated %d fields (%s mode), %d with issues",
        len(results),
        "partial" if is_partial_schema else "full",
        sum(1 for result in results if not result.success),
    )
    return FormValidationResult(results=results)
