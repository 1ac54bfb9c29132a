"""
Common Pydantic schemas
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Optional
from pydantic import AfterValidator, BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

URL_PATTERN = r"^https?://\S+$"

def ensure_aware(value: datetime) -> datetime:
    """Naive timestamps are taken to be UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value

def normalize_timestamp(value: datetime) -> datetime:
    """Aware, with millisecond precision, so a value survives a storage round trip unchanged"""
    value = ensure_aware(value)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)

def to_iso(value: datetime) -> str:
    """Render a timestamp as `2024-05-01T18:00:00.000Z`, the stored format"""
    value = ensure_aware(value).astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S") + f".{value.microsecond // 1000:03d}Z"

Timestamp = Annotated[
    datetime,
    AfterValidator(normalize_timestamp),
    PlainSerializer(to_iso, return_type=str),
]

class CamelModel(BaseModel):
    """Base for stored records: snake_case attributes, camelCase JSON keys"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class StandardResponse(BaseModel):
    """Standard API response"""
    success: bool
    message: str
    data: Optional[Any] = None

class ErrorResponse(BaseModel):
    """Error response schema"""
    success: bool = False
    message: str
    error_code: Optional[str] = None
    details: Optional[Any] = None
