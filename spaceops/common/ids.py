"""Run identifier helpers."""

from __future__ import annotations

import secrets
from datetime import datetime, timezone


def generate_run_id() -> str:
    stamp = datetime.now(tz=timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    return f"run-{stamp}-{secrets.token_hex(3)}"
