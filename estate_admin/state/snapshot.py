import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..models.user import SessionUser

log = logging.getLogger(__name__)


class SnapshotStore:
    """Local copy of the logged-in user record, kept between dashboard restarts."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> Optional[SessionUser]:
        if not self.path.exists():
            return None
        try:
            return SessionUser.model_validate(json.loads(self.path.read_text(encoding="utf-8")))
        except (OSError, json.JSONDecodeError, ValidationError):
            log.warning("Ignoring unreadable user snapshot at %s", self.path)
            return None

    def save(self, user: SessionUser) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(user.model_dump_json(), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
