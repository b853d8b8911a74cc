"""Root conftest: export .env.test before pulse_chat.config builds its settings."""
from __future__ import annotations

import os
from pathlib import Path


def _export_env_file(path: Path) -> None:
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        key, _, value = line.partition("=")
        os.environ.setdefault(key.strip(), value.strip())


_env_test = Path(__file__).resolve().parent / ".env.test"
if _env_test.exists():
    _export_env_file(_env_test)
