"""
Request payload models.

Pydantic models for the JSON bodies accepted by the tracking endpoints.
Field aliases follow the camelCase names sent by the browser tracker.
"""

from typing import Any, Dict, Optional, Type, TypeVar, Union

import pydantic
from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt

from .errors import ValidationError

PayloadT = TypeVar("PayloadT", bound=BaseModel)


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class VisitPayload(_Payload):
    """Body of POST /visit."""
    session_id: str = Field(alias="sessionId", description="Client generated session id")
    referrer: Optional[str] = Field(default=None, description="document.referrer")
    utm_source: Optional[str] = Field(default=None, alias="utmSource")
    utm_medium: Optional[str] = Field(default=None, alias="utmMedium")
    utm_campaign: Optional[str] = Field(default=None, alias="utmCampaign")


class PageViewPayload(_Payload):
    """Body of POST /page-view."""
    session_id: str = Field(alias="sessionId")
    page: str = Field(description="Path of the viewed page")
    # Strict so "10" and true are rejected rather than coerced
    time_spent: Optional[Union[StrictInt, StrictFloat]] = Field(
        default=None, alias="timeSpent", description="Seconds on page"
    )


class ActionPayload(_Payload):
    """Body of POST /action."""
    session_id: str = Field(alias="sessionId")
    type: str = Field(description="Action type")
    element: str = Field(description="Element identifier, e.g. hire-form")
    data: Optional[Dict[str, Any]] = Field(default=None, description="Opaque scalar map")


def parse_payload(model: Type[PayloadT], data: Any) -> PayloadT:
    """Validate a request body, converting pydantic errors to ValidationError."""
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object", ["body: must be a JSON object"])
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        errors = []
        for err in exc.errors():
            loc = ".".join(str(part) for part in err.get("loc", ())) or "body"
            errors.append(f"{loc}: {err.get('msg', 'invalid')}")
        raise ValidationError("Invalid analytics payload", errors) from exc
