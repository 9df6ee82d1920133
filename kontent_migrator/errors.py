"""Exceptions raised outside the pure mapping core."""

from typing import Any, Dict, Optional


class KontentMigratorError(Exception):
    """Base class for all migrator errors."""


class ConfigurationError(KontentMigratorError):
    """Raised when an environment or client is not configured."""


class MigrationError(KontentMigratorError):
    """Raised when a migration cannot start or must abort."""


class KontentApiError(KontentMigratorError):
    """An HTTP call to the Kontent.ai API failed."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[int] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.request_id = request_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "status_code": self.status_code,
            "error_code": self.error_code,
            "request_id": self.request_id,
        }
