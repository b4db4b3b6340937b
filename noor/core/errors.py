"""Error taxonomy for the streak core."""

import builtins
from typing import Optional


class AppError(Exception):
    code = "app_error"

    def __init__(self, message: str, *, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class ConfigError(AppError, ValueError):
    code = "config_error"


class AccessDeniedError(AppError, builtins.PermissionError):
    """Raised when a premium challenge is completed without an entitlement."""
    code = "forbidden"


class StorageError(AppError):
    code = "storage_error"


class StorageReadError(StorageError):
    code = "storage_read_failed"


class StorageWriteError(StorageError):
    code = "storage_write_failed"
