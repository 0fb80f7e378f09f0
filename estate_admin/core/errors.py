from typing import Dict, List, Optional

from pydantic import ValidationError


class ApiError(Exception):
    """Raised when a backend call cannot produce a usable JSON payload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ApiNetworkError(ApiError):
    pass


class ApiDecodeError(ApiError):
    pass


class UnauthorizedError(Exception):
    """The backend rejected the session token; the local session is already cleared.

    Propagates past the per-screen ``ApiError`` handlers.
    """

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)
        self.message = message


class FormValidationError(Exception):
    """Per-field validation failures that block a form submission."""

    def __init__(self, errors: Dict[str, List[str]]):
        super().__init__("; ".join(f"{field}: {', '.join(msgs)}" for field, msgs in errors.items()))
        self.errors = errors

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> "FormValidationError":
        errors: Dict[str, List[str]] = {}
        for item in exc.errors():
            loc = item.get("loc") or ("__root__",)
            field = str(loc[0])
            errors.setdefault(field, []).append(item.get("msg", "Invalid value"))
        return cls(errors)


class ConfirmationRequired(Exception):
    """A destructive operation was requested without the operator's confirmation."""

    def __init__(self, prompt: str):
        super().__init__(prompt)
        self.prompt = prompt
