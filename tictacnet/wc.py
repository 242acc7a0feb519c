"""Count lines, words and bytes."""

from __future__ import annotations

import sys
from typing import NamedTuple, Optional, Sequence, Union

# A NUL byte separates words as well.
_SEPARATORS = frozenset(b" \r\t\n\v\0")
_CHUNK = 512


class Counts(NamedTuple):
    lines: int
    words: int
    chars: int


def count(data: Union[bytes, str]) -> Counts:
    """Count newlines, words and bytes in ``data``."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    words = 0
    in_word = False
    for byte in data:
        if byte in _SEPARATORS:
            in_word = False
        elif not in_word:
            words += 1
            in_word = True
    return Counts(data.count(b"\n"), words, len(data))


def _report(stream, name: str) -> None:
    data = b"".join(iter(lambda: stream.read(_CHUNK), b""))
    counts = count(data)
    print(f"{counts.lines} {counts.words} {counts.chars} {name}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Print the counts for each named file, or for standard input."""
    paths = list(sys.argv[1:] if argv is None else argv)
    try:
        if not paths:
            _report(sys.stdin.buffer, "")
            return 0
        for path in paths:
            try:
                handle = open(path, "rb")
            except OSError:
                print(f"wc: cannot open {path}")
                return 1
            with handle:
                _report(handle, path)
    except OSError:
        print("wc: read error")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())