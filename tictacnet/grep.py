"""Line filter with a tiny regular-expression matcher: ^ . * $ only."""

from __future__ import annotations

import sys
from typing import Iterable, Iterator, Optional, Sequence

USAGE = "usage: grep pattern [file ...]"

# The longest line, newline included, that the line buffer can hold.
_MAX_LINE = 1023


def match(pattern: str, text: str) -> bool:
    """Return True if ``pattern`` matches anywhere in ``text``."""
    if pattern.startswith("^"):
        return _match_here(pattern[1:], text)
    return any(_match_here(pattern, text[start:]) for start in range(len(text) + 1))


def _match_here(pattern: str, text: str) -> bool:
    if not pattern:
        return True
    if len(pattern) > 1 and pattern[1] == "*":
        return _match_star(pattern[0], pattern[2:], text)
    if pattern == "$":
        return not text
    if text and pattern[0] in (".", text[0]):
        return _match_here(pattern[1:], text[1:])
    return False


def _match_star(char: str, pattern: str, text: str) -> bool:
    position = 0
    while True:
        if _match_here(pattern, text[position:]):
            return True
        if position < len(text) and (text[position] == char or char == "."):
            position += 1
        else:
            return False


def grep_lines(pattern: str, stream: Iterable[str]) -> Iterator[str]:
    """Yield the complete lines of ``stream`` that match ``pattern``.

    A final line without a newline is never reported, and reading stops at
    a line too long for the line buffer.
    """
    for line in stream:
        if len(line) > _MAX_LINE or not line.endswith("\n"):
            return
        if match(pattern, line[:-1]):
            yield line


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Print the lines of the named files, or of standard input, that match."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print(USAGE, file=sys.stderr)
        return 1
    pattern, paths = args[0], args[1:]
    if not paths:
        sys.stdout.writelines(grep_lines(pattern, sys.stdin))
        sys.stdout.flush()
        return 0
    for path in paths:
        try:
            handle = open(path, encoding="utf-8", errors="surrogateescape", newline="")
        except OSError:
            print(f"grep: cannot open {path}")
            return 1
        with handle:
            sys.stdout.writelines(grep_lines(pattern, handle))
        sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())