from typing import Literal
from pydantic import BaseModel


class Notice(BaseModel):
    """A toast-style notification produced by a dashboard operation."""

    level: Literal["success", "error", "info"] = "info"
    message: str

    @classmethod
    def success(cls, message: str) -> "Notice":
        return cls(level="success", message=message)

    @classmethod
    def error(cls, message: str) -> "Notice":
        return cls(level="error", message=message)
