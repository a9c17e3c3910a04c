"""
Error taxonomy.

Services raise these; the handlers registered in `app.main` turn them
into `{"success": false, "message": ...}` responses with `status_code`.
"""

from typing import Optional


class PortalError(Exception):
    """Base error carrying an HTTP-equivalent status code."""

    status_code = 500

    def __init__(self, message: str, component: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.component = component
        if status_code is not None:
            self.status_code = status_code

    def __str__(self) -> str:
        if self.component:
            return f"[{self.component}] {self.message}"
        return self.message


class Unauthorized(PortalError):
    status_code = 401


class Forbidden(PortalError):
    # The portal frontend expects 400 for role violations
    status_code = 400


class ValidationError(PortalError):
    status_code = 400


class NotFound(PortalError):
    status_code = 404


class UploadFailed(PortalError):
    status_code = 500


class InternalError(PortalError):
    status_code = 500
