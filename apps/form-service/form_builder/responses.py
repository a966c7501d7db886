from typing import Any, Dict, List, Union

from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr, TypeAdapter, ValidationError

from form_builder.errors import ResponseShapeError


class OptionResponse(BaseModel):
    # radioInput stores the selected option together with its follow-up input.
    model_config = ConfigDict(extra="forbid")

    optionValue: StrictStr
    value: StrictStr


ResponseValue = Union[
    StrictStr,
    StrictBool,
    List[StrictStr],
    OptionResponse,
    # Variant fields, e.g. {"firstName": ..., "lastName": ...}
    Dict[StrictStr, StrictStr],
]

_response_adapter: TypeAdapter = TypeAdapter(ResponseValue)


def parse_response(value: Any) -> Any:
    """Validate ``value`` against the accepted response shapes.

    Returns plain Python data in the canonical shape or raises
    :class:`ResponseShapeError` when no shape matches.
    """
    try:
        parsed = _response_adapter.validate_python(value)
    except ValidationError as exc:
        raise ResponseShapeError(f"Unsupported response shape: {type(value).__name__}") from exc
    return _response_adapter.dump_python(parsed)
