"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for the dashboard's error
taxonomy, so services and rules can raise without choosing status codes.

Taxonomy:
    - ValidationError (422): 필수 필드 누락/형식 오류 — rejected before any write
    - InvalidTransitionError (409): 허용되지 않은 상태 전이 (Task/Issue lifecycle)
    - StoreError (503): 저장소 연결/권한 실패 — surfaced as-is, never retried
    - NotFoundError / DuplicateError / ConflictError / BadRequestError

Usage:
    from app.utils.exceptions import NotFoundError, InvalidTransitionError
    raise NotFoundError("Zone not found")
    raise InvalidTransitionError("Cannot verify a task in status 'Pending'")
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    404 Not Found exception.
    Raised when a requested record (zone, staff, task, issue, etc.) does not exist.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """409 Conflict 예외 — 중복 생성/배정 시도 시 사용.

    409 Conflict exception.
    Raised when an operation would create a duplicate
    (e.g. same staff assigned twice to a shift, duplicate shift type in a zone).

    Args:
        detail: 오류 메시지 (Error message, default: "Resource already exists")
    """

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ConflictError(HTTPException):
    """409 Conflict 예외 — 참조 중인 레코드 삭제 시 사용.

    409 Conflict exception.
    Raised when deleting a record that other records still reference
    (e.g. a zone that still has shifts, facilities or tasks).

    Args:
        detail: 오류 메시지 (Error message, default: "Resource is still referenced")
    """

    def __init__(self, detail: str = "Resource is still referenced") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — 잘못된 요청 데이터 시 사용.

    400 Bad Request exception.
    Raised for malformed requests outside field validation
    (e.g. unsupported upload file extension).

    Args:
        detail: 오류 메시지 (Error message, default: "Bad request")
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ValidationError(HTTPException):
    """422 Unprocessable Entity 예외 — 비즈니스 검증 실패.

    422 validation exception.
    Raised when a required field is missing or malformed beyond what
    Pydantic catches (empty name, non-finite coordinate, empty evidence set,
    status outside a facility type's vocabulary). Always raised before any
    store mutation.

    Args:
        detail: 오류 메시지 (Error message, default: "Validation failed")
    """

    def __init__(self, detail: str = "Validation failed") -> None:
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class InvalidTransitionError(HTTPException):
    """409 Conflict 예외 — 허용되지 않은 상태 전이.

    409 Conflict exception for lifecycle violations.
    Raised when a Task or Issue state change is not permitted; the record
    is never coerced to the nearest valid state.

    Args:
        detail: 오류 메시지 (Error message, default: "Invalid state transition")
    """

    def __init__(self, detail: str = "Invalid state transition") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class StoreError(HTTPException):
    """503 Service Unavailable 예외 — 저장소 실패.

    503 exception for store failures (connectivity, permission denied at the
    database level). Surfaced to the caller as-is: no retry, no local queuing.

    Args:
        detail: 오류 메시지 (Error message, default: "Store unavailable")
    """

    def __init__(self, detail: str = "Store unavailable") -> None:
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)
