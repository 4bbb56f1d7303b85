from __future__ import annotations

import sys

from verified_users_cli.typer_app import run


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    return run(argv)


if __name__ == "__main__":
    raise SystemExit(main())
