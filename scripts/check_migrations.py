#!/usr/bin/env python
"""
Fail when the models have drifted from the migrations.

Runs ``alembic check`` against the configured database, which compares
the metadata of the staff, role and permission models with the schema
produced by the migration history.
"""

import os
import subprocess
import sys


def main() -> int:
    """Return 0 when the migrations cover every model change."""
    print("Checking if migrations are in sync with models...")

    result = subprocess.run(
        ["alembic", "check"],
        capture_output=True,
        text=True,
        check=False,
        env={"PYTHONPATH": "src", **os.environ},
    )
    output = result.stdout + result.stderr

    if result.returncode != 0:
        print("Pending model changes not captured in migrations:")
        print(output)
        return 1

    print("Models and migrations are in sync")
    return 0


if __name__ == "__main__":
    sys.exit(main())
