"""Allow ``python -m backlog_cli``."""

from __future__ import annotations

from backlog_cli.main import main

if __name__ == "__main__":
    raise SystemExit(main())
