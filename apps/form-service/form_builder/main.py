import logging
import os
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from pydantic import Field

from form_builder.errors import FieldConfigurationError
from form_builder.field_types import field_types_config_map
from form_builder.messages import get_localizer
from form_builder.models import CamelModel, FieldSchema
from form_builder.validation import validate_responses

load_dotenv()

app = FastAPI(title="Form Builder Service")
logger = logging.getLogger(__name__)

DEFAULT_LOCALE = os.getenv("FORM_BUILDER_LOCALE", "en")

logger.info("Default locale: %s", DEFAULT_LOCALE)


class ValidateRequest(CamelModel):
    fields: List[FieldSchema] = Field(default_factory=list)
    responses: Dict[str, Any] = Field(default_factory=dict)
    is_partial_schema: bool = False
    locale: Optional[str] = None


@app.get("/health")
async def health():
    return {"ok": True, "service": "form-service"}


@app.get("/field-types")
async def field_types():
    return [
        config.model_dump(by_alias=True, exclude_none=True)
        for config in field_types_config_map.values()
    ]


@app.post("/validate")
def validate_endpoint(payload: ValidateRequest):
    m = get_localizer(payload.locale or DEFAULT_LOCALE)
    try:
        result = validate_responses(
            payload.fields,
            payload.responses,
            is_partial_schema=payload.is_partial_schema,
            m=m,
        )
    except FieldConfigurationError as exc:
        logger.error("Rejected malformed field configuration: %s", exc)
        raise HTTPException(status_code=422, detail=f"invalid_field_configuration: {exc}") from exc

    issues = {
        name: [issue.model_dump() for issue in field_issues]
        for name, field_issues in result.issues().items()
    }
    logger.info(
        "Validated %d responses against %d fields (%d failing)",
        len(payload.responses),
        len(payload.fields),
        len(issues),
    )
    return {"ok": result.success, "responses": result.values(), "issues": issues}
