"""Typed errors raised by services and turned into JSON responses by the app."""


class AdminError(Exception):
    """Base class for errors surfaced to the admin client."""

    status_code = 400
    error_type = "admin_error"

    def __init__(self, message: str, errors: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors or {}

    def to_dict(self) -> dict[str, object]:
        return {
            "detail": self.message,
            "type": self.error_type,
            "errors": self.errors,
        }


class ValidationError(AdminError):
    """Input rejected before any write; `errors` maps field -> message."""

    status_code = 400
    error_type = "validation_error"


class NotFoundError(AdminError):
    status_code = 404
    error_type = "not_found_error"


class PermissionDeniedError(AdminError):
    status_code = 403
    error_type = "permission_error"


class NoChapterSelectedError(AdminError):
    status_code = 400
    error_type = "no_chapter_selected"

    def __init__(self, message: str = "No chapter selected") -> None:
        super().__init__(message)


class StoreError(AdminError):
    """Backend read/write failure; not retried."""

    status_code = 502
    error_type = "store_error"
