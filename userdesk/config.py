"""Runtime settings, read from the environment.

    USERDESK_STORAGE   path of the local storage file
    USERDESK_API_URL   remote user list consulted when no snapshot exists
    USERDESK_TIMEOUT   fetch timeout in seconds (unset: wait indefinitely)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from userdesk.remote import DEFAULT_API_URL


def default_storage_path() -> Path:
    return Path.home() / ".userdesk" / "storage.json"


@dataclass
class Settings:
    storage_path: Path
    api_url: str = DEFAULT_API_URL
    timeout_s: Optional[float] = None

    @classmethod
    def from_env(cls, env: Optional[dict[str, str]] = None) -> Settings:
        env = os.environ if env is None else env
        storage = env.get("USERDESK_STORAGE")
        timeout = env.get("USERDESK_TIMEOUT")
        try:
            timeout_s = float(timeout) if timeout else None
        except ValueError:
            raise ValueError(f"USERDESK_TIMEOUT must be a number of seconds, got {timeout!r}")
        return cls(
            storage_path=Path(storage).expanduser() if storage else default_storage_path(),
            api_url=env.get("USERDESK_API_URL") or DEFAULT_API_URL,
            timeout_s=timeout_s,
        )
