import math
import re
from datetime import datetime, timezone
from typing import Any

from dateutil.parser import isoparse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

NUMERIC_PATTERN = re.compile(r"[+-]?([0-9]*[.])?[0-9]+")

# One rule per field, so one message per field
FIELD_ERROR_MESSAGES = {
    "question": "Question is required",
    "category": "Category is required",
    "expiryTime": "Expiry time must be a valid date",
    "predictionId": "Prediction ID is required",
    "userId": "User ID is required",
    "opinion": 'Opinion must be either "Yes" or "No"',
    "amount": "Amount must be a number",
}


class CamelModel(BaseModel):
    """Request/response model exposing camelCase field names on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


def parse_iso8601(value: Any) -> datetime:
    if not isinstance(value, str):
        raise ValueError(FIELD_ERROR_MESSAGES["expiryTime"])
    try:
        parsed = isoparse(value)
    except (ValueError, OverflowError):
        raise ValueError(FIELD_ERROR_MESSAGES["expiryTime"])
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def check_numeric(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError(FIELD_ERROR_MESSAGES["amount"])
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise ValueError(FIELD_ERROR_MESSAGES["amount"])
        return value
    if isinstance(value, str) and NUMERIC_PATTERN.fullmatch(value):
        return value
    raise ValueError(FIELD_ERROR_MESSAGES["amount"])


def format_validation_errors(errors: list[dict]) -> list[dict]:
    formatted = []
    for error in errors:
        path = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(path) or "body"
        if error.get("type") == "json_invalid":
            field = "body"
        message = FIELD_ERROR_MESSAGES.get(field, error.get("msg", "Invalid value"))
        formatted.append({"field": field, "message": message})
    return formatted
