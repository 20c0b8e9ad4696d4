from typing import Optional

from fastapi import status


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AdmissionsBackendError(ServiceError):
    """The admissions backend rejected a call or could not be reached."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_502_BAD_GATEWAY,
        upstream_status: Optional[int] = None,
    ) -> None:
        super().__init__(message, status_code)
        self.upstream_status = upstream_status
