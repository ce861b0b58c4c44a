"""
Signed-in user session for client applications.

``SessionContext`` holds the current user in memory. ``SessionStore``
persists it as ``user.json`` so a session survives restarts; loading and
saving are explicit calls made by the owner of the context.
"""

import json
import os
from pathlib import Path
from typing import Optional

import structlog
from pydantic import ValidationError

from shelf_client.models import User

logger = structlog.get_logger(__name__)


class SessionContext:
    """Current user, if any."""

    def __init__(self, user: Optional[User] = None):
        self.user = user

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def set_user(self, user: User) -> None:
        self.user = user

    def logout(self) -> None:
        self.user = None


class SessionStore:
    """File-backed session persistence with atomic writes."""

    STORAGE_FILE = "user.json"

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self.session_file = self.directory / self.STORAGE_FILE
        self.temp_file = self.directory / f"{self.STORAGE_FILE}.tmp"

        self.directory.mkdir(parents=True, exist_ok=True)

    def load(self) -> SessionContext:
        """
        Restore the stored session.

        A missing file yields an anonymous context. An unreadable or
        malformed file is removed and also yields an anonymous context.
        """
        if not self.session_file.exists():
            return SessionContext()

        try:
            with open(self.session_file, "r") as f:
                data = json.load(f)
            user = User.model_validate(data)
        except (json.JSONDecodeError, ValidationError, UnicodeDecodeError) as e:
            logger.warning("session_file_corrupt", path=str(self.session_file), error=str(e))
            self.clear()
            return SessionContext()

        logger.debug("session_loaded", user_id=user.id)
        return SessionContext(user)

    def save(self, context: SessionContext) -> None:
        """Persist the context; an anonymous context clears the file."""
        if not context.is_authenticated:
            self.clear()
            return

        with open(self.temp_file, "w") as f:
            json.dump(context.user.model_dump(by_alias=True), f, indent=2)

        os.replace(self.temp_file, self.session_file)
        logger.debug("session_saved", user_id=context.user.id)

    def clear(self) -> None:
        if self.session_file.exists():
            self.session_file.unlink()
            logger.info("session_cleared")
