from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Connection settings for one TinEye Services API.

    `max_upload_bytes` caps a whole POST body, multipart headers included;
    None leaves bodies uncapped (images are still capped when read).

    Security notes:
    - The password is excluded from repr() so configs can be logged.

    """

    api_url: str
    username: Optional[str] = None
    password: Optional[str] = None
    timeout_sec: Optional[float] = None
    max_upload_bytes: Optional[int] = None

    def __repr__(self) -> str:
        return (
            f"ClientConfig(api_url={self.api_url!r}, username={self.username!r}, "
            f"password={'***' if self.password else None}, timeout_sec={self.timeout_sec!r}, "
            f"max_upload_bytes={self.max_upload_bytes!r})"
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        """Read TINEYE_* environment variables.

        TINEYE_API_URL, TINEYE_API_USERNAME, TINEYE_API_PASSWORD,
        TINEYE_TIMEOUT_SEC, TINEYE_MAX_UPLOAD_BYTES. Unparsable or
        non-positive numbers leave the setting unset.
        """

        env = os.environ if environ is None else environ
        max_upload = _env_int(env, "TINEYE_MAX_UPLOAD_BYTES", 0)
        return cls(
            api_url=(env.get("TINEYE_API_URL") or "").strip(),
            username=env.get("TINEYE_API_USERNAME") or None,
            password=env.get("TINEYE_API_PASSWORD") or None,
            timeout_sec=_env_float(env, "TINEYE_TIMEOUT_SEC"),
            max_upload_bytes=max_upload if max_upload > 0 else None,
        )


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    """Read an integer environment variable."""

    raw = env.get(name, "").strip()
    if not raw:
        return int(default)
    try:
        return int(raw)
    except ValueError:
        return int(default)


def _env_float(env: Mapping[str, str], name: str) -> Optional[float]:
    """Read a positive float environment variable, None if unset or invalid."""

    raw = env.get(name, "").strip()
    try:
        value = float(raw)
    except ValueError:
        return None
    # nan and inf are not usable socket timeouts
    if not 0 < value < float("inf"):
        return None
    return value
