#!/usr/bin/env python
"""CI smoke check: migrations applied, database reachable, shift dedup key present."""

from __future__ import annotations

import sys
from pathlib import Path

from alembic import command
from sqlalchemy import inspect, text

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

from shiftboard.db import SessionLocal, engine  # noqa: E402  (import after sys.path tweak)
from shiftboard.migration_runner import build_alembic_config  # noqa: E402

MATERIALIZATION_KEY = "uq_scheduled_shift_materialization"


def _verify_migration_state() -> None:
    command.current(build_alembic_config())


def _verify_database() -> None:
    with SessionLocal() as session:
        session.execute(text("SELECT 1 FROM scheduled_shifts LIMIT 1"))


def _verify_materialization_key() -> None:
    names = {c["name"] for c in inspect(engine).get_unique_constraints("scheduled_shifts")}
    if MATERIALIZATION_KEY not in names:
        raise RuntimeError(f"missing unique constraint {MATERIALIZATION_KEY} on scheduled_shifts")


def main() -> int:
    try:
        _verify_migration_state()
        _verify_database()
        _verify_materialization_key()
    except Exception as exc:
        print(f"[smoke_test] failure: {exc}", file=sys.stderr)
        return 1
    print("[smoke_test] passed", flush=True)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
