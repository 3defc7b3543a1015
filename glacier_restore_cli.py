#!/usr/bin/env python3
"""CLI entry point for planning, requesting and tracking Glacier restores.

Thin wrapper around the glacier_restore package:
  - glacier_restore.enumerator: Paginated bucket and object listing
  - glacier_restore.planner: Dry-run restore planning
  - glacier_restore.submitter: Restore request submission
  - glacier_restore.status: Restore status aggregation
  - glacier_restore.cli: Command-line interface and main entry point
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the repository root is importable even when this script is run via an absolute path.
REPO_ROOT = Path(__file__).resolve().parent
if str(REPO_ROOT) not in sys.path:  # pragma: no cover - import context dependent
    sys.path.insert(0, str(REPO_ROOT))

from glacier_restore.cli import main  # pylint: disable=wrong-import-position

if __name__ == "__main__":  # pragma: no cover - script entry point
    try:
        raise SystemExit(main())
    except KeyboardInterrupt as exc:
        print("\n✗ Glacier restore interrupted by user.", file=sys.stderr)
        raise SystemExit(130) from exc
