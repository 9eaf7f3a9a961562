"""Configuration for pydrivemirror.

Settings come from environment variables, optionally loaded from a ``.env``
file in the working directory (or one of its parents).
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_DRIVE_API_BASE = "https://graph.microsoft.com/v1.0/me/drive"


class Config:
    """Read-only view of the process environment."""

    def load_env_file(self, env_file: Optional[str] = None) -> Optional[str]:
        """Load variables from a ``.env`` file into the environment.

        Variables already set in the environment take precedence.

        Args:
            env_file: Explicit path to a dotenv file. When omitted the file is
                searched from the current working directory upwards.

        Returns:
            Path of the loaded file, or None if no file was found
        """
        env_path = env_file or find_dotenv(usecwd=True)
        if not env_path:
            logger.debug("No .env file found")
            return None
        load_dotenv(dotenv_path=env_path, override=False)
        logger.debug("Loaded environment from %s", env_path)
        return env_path

    @staticmethod
    def _get(name: str) -> Optional[str]:
        value = os.environ.get(name)
        return value if value else None

    @property
    def drive_api_base(self) -> str:
        """Graph URL of the drive, e.g. ``.../v1.0/drives/{drive-id}``."""
        return (self._get("DRIVE_API_BASE") or DEFAULT_DRIVE_API_BASE).rstrip("/")

    @property
    def parent_folder(self) -> str:
        """Remote folder to mirror, relative to the drive root."""
        return (self._get("PARENT_FOLDER") or "").strip("/")

    @property
    def out_path(self) -> Optional[Path]:
        value = self._get("OUT_PATH")
        return Path(value) if value else None

    @property
    def tenant_id(self) -> Optional[str]:
        return self._get("TENANT_ID")

    @property
    def client_id(self) -> Optional[str]:
        return self._get("CLIENT_ID")

    @property
    def client_secret(self) -> Optional[str]:
        return self._get("CLIENT_SECRET")

    @property
    def diff_list(self) -> Optional[Path]:
        """File receiving the local path of every downloaded file."""
        value = self._get("DIFF_LIST")
        return Path(value) if value else None


config = Config()
