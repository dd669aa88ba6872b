"""Runtime settings for the J&C Motorhomes dealer desk, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from camper_mcp.constants import SITE_NAME

_DEFAULT_DB_PATH = str(Path(__file__).resolve().parent / "data" / "dealer.db")
_ENV_FILE = Path(__file__).resolve().parent.parent / ".env"


@dataclass(frozen=True)
class Settings:
    db_path: str = _DEFAULT_DB_PATH
    resend_api_key: str = ""
    notify_from: str = f"{SITE_NAME} <noreply@jc-motorhomes.be>"
    notify_to: str = "info@jc-motorhomes.be"
    supabase_url: str = ""
    supabase_anon_key: str = ""
    admin_session_ttl_minutes: int = 60

    @classmethod
    def from_env(cls) -> Settings:
        defaults = cls()
        ttl_raw = os.environ.get("ADMIN_SESSION_TTL_MINUTES", "").strip()
        return cls(
            db_path=os.environ.get("CAMPER_DB_PATH", defaults.db_path),
            resend_api_key=os.environ.get("RESEND_API_KEY", "").strip(),
            notify_from=os.environ.get("NOTIFY_FROM", defaults.notify_from),
            notify_to=os.environ.get("NOTIFY_TO", defaults.notify_to),
            supabase_url=os.environ.get("SUPABASE_URL", "").strip().rstrip("/"),
            supabase_anon_key=os.environ.get("SUPABASE_ANON_KEY", "").strip(),
            admin_session_ttl_minutes=(
                int(ttl_raw) if ttl_raw.isdigit() else defaults.admin_session_ttl_minutes
            ),
        )


def load_env_file(path: Path = _ENV_FILE) -> None:
    """Load KEY=VALUE lines from a .env file without overriding the real environment."""
    if not path.is_file():
        return
    for line in path.read_text().splitlines():
        line = line.strip()
        if line and not line.startswith("#") and "=" in line:
            k, _, v = line.partition("=")
            os.environ.setdefault(k.strip(), v.strip())
