"""
Standardized response utilities
"""

from typing import Any, Iterable, List, Optional
from fastapi import HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from campus_pulse.schemas import Club
from campus_pulse.schemas.common import StandardResponse, ErrorResponse
from campus_pulse.services.errors import (
    AuthenticationError,
    CampusPulseError,
    DuplicateClubError,
    NotFoundError,
    ReviewNotAllowedError,
    StorageWriteError,
)

def dump(model: BaseModel) -> dict:
    """JSON-ready dict with the stored camelCase keys"""
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)

def dump_all(models: Iterable[BaseModel]) -> List[dict]:
    return [dump(model) for model in models]

def public_club(club: Club) -> dict:
    """Club as shown to anyone: never includes the password"""
    data = dump(club)
    data.pop("password", None)
    return data

def success_response(
    message: str,
    data: Any = None,
    status_code: int = 200
) -> JSONResponse:
    """Create standardized success response"""
    response = StandardResponse(
        success=True,
        message=message,
        data=data
    )
    return JSONResponse(
        content=response.model_dump(),
        status_code=status_code
    )

def error_response(
    message: str,
    error_code: Optional[str] = None,
    details: Any = None,
    status_code: int = 400
) -> JSONResponse:
    """Create standardized error response"""
    response = ErrorResponse(
        message=message,
        error_code=error_code,
        details=details
    )
    return JSONResponse(
        content=response.model_dump(),
        status_code=status_code
    )

def domain_error_response(error: CampusPulseError) -> JSONResponse:
    """Map a service-layer error onto a standardized error response"""
    if isinstance(error, AuthenticationError):
        return error_response(str(error), error_code="login_failed", status_code=401)
    if isinstance(error, DuplicateClubError):
        return error_response(str(error), error_code="duplicate_club", status_code=409)
    if isinstance(error, NotFoundError):
        return error_response(f"{error.resource} not found", error_code="not_found", status_code=404)
    if isinstance(error, ReviewNotAllowedError):
        return error_response(str(error), error_code="review_not_allowed", status_code=409)
    if isinstance(error, StorageWriteError):
        return error_response(str(error), error_code="storage_write_failed", status_code=507)
    return error_response(str(error), status_code=500)

def not_found_error(resource: str = "Resource"):
    """Create not found error"""
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"{resource} not found"
    )

def unauthorized_error(message: str = "Unauthorized"):
    """Create unauthorized error"""
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=message
    )
