"""
Domain exceptions.

Services raise these; the global handler in ``protrack.main`` turns them into
``{"success": false, "error": {...}}`` responses through ``to_http_exception``.
"""
from typing import Any

from fastapi import HTTPException, status


class ProTrackException(Exception):
    code = "PROTRACK_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class EntityNotFoundException(ProTrackException):
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} '{entity_id}' not found.")
        self.entity = entity
        self.entity_id = entity_id


class BusinessRuleViolationException(ProTrackException):
    code = "BUSINESS_RULE_VIOLATION"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class AuthenticationException(ProTrackException):
    code = "AUTHENTICATION_FAILED"
    status_code = status.HTTP_401_UNAUTHORIZED


class PageAccessDeniedException(ProTrackException):
    code = "PAGE_ACCESS_DENIED"
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, page: str):
        super().__init__(f"No access to page '{page}'.")
        self.page = page


class GatewayException(ProTrackException):
    """The spreadsheet store could not be reached or rejected the call."""

    code = "GATEWAY_ERROR"
    status_code = status.HTTP_502_BAD_GATEWAY


class FetchError(GatewayException):
    code = "GATEWAY_FETCH_FAILED"


class GatewayWriteError(GatewayException):
    code = "GATEWAY_WRITE_FAILED"


def to_http_exception(exc: ProTrackException) -> HTTPException:
    return HTTPException(
        status_code=exc.status_code,
        detail={"code": exc.code, "message": exc.message},
    )
