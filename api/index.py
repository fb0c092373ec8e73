"""Serverless ASGI entrypoint for shiftboard."""

from __future__ import annotations

import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
	sys.path.append(str(ROOT_DIR))

from shiftboard.config import get_settings  # noqa: E402
from shiftboard.migration_runner import run_migrations_once  # noqa: E402

# Cold starts may skip the ASGI startup event, so migrate before the app is imported.
if get_settings().run_migrations_on_startup:
	run_migrations_once()

from shiftboard.main import app  # noqa: E402,F401
