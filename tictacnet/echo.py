"""Print the arguments separated by spaces."""

from __future__ import annotations

import sys
from typing import Optional, Sequence


def echo(args: Sequence[str]) -> str:
    """Return the arguments joined by spaces, newline-terminated; empty if none."""
    if not args:
        return ""
    return " ".join(args) + "\n"


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    sys.stdout.write(echo(args))
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())