#!/usr/bin/env python
"""Launch the shiftboard API for container deployments.

Migrations are applied in-process before uvicorn starts, unless
RUN_MIGRATIONS_ON_STARTUP=0. Set RUNSERVER_CMD to replace the server command.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

from shiftboard.config import get_settings  # noqa: E402
from shiftboard.migration_runner import run_migrations_once  # noqa: E402

logger = logging.getLogger("runserver")


def _server_command() -> list[str]:
    configured = os.getenv("RUNSERVER_CMD")
    if configured:
        return shlex.split(configured)
    command = [
        "uvicorn",
        "shiftboard.main:app",
        "--host",
        os.getenv("HOST", "0.0.0.0"),
        "--port",
        os.getenv("PORT", "8000"),
    ]
    if get_settings().environment == "development":
        command.append("--reload")
    return command


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="[%(name)s] %(message)s")
    settings = get_settings()
    try:
        if settings.run_migrations_on_startup:
            run_migrations_once()
        command = _server_command()
        logger.info("Starting server: %s", " ".join(command))
        # The app would otherwise migrate again inside the worker process.
        env = dict(os.environ, RUN_MIGRATIONS_ON_STARTUP="0")
        subprocess.run(command, check=True, cwd=PROJECT_ROOT, env=env)
    except subprocess.CalledProcessError as exc:
        logger.error("command failed: %s", exc)
        return exc.returncode or 1
    except Exception:
        logger.exception("unexpected error")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
