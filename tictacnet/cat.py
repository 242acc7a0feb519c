"""Copy files, or standard input, to standard output."""

from __future__ import annotations

import sys
from typing import BinaryIO, Optional, Sequence

_CHUNK = 512


def cat(source: BinaryIO, destination: BinaryIO) -> int:
    """Copy ``source`` to ``destination``; return the number of bytes copied."""
    total = 0
    while True:
        try:
            chunk = source.read(_CHUNK)
        except OSError as err:
            raise OSError("cat: read error") from err
        if not chunk:
            return total
        try:
            written = destination.write(chunk)
        except OSError as err:
            raise OSError("cat: write error") from err
        if written is not None and written != len(chunk):
            raise OSError("cat: write error")
        total += len(chunk)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Concatenate the named files, or standard input, onto standard output."""
    paths = list(sys.argv[1:] if argv is None else argv)
    out = sys.stdout.buffer
    try:
        if not paths:
            cat(sys.stdin.buffer, out)
            return 0
        for path in paths:
            try:
                handle = open(path, "rb")
            except OSError:
                print(f"cat: cannot open {path}", file=sys.stderr)
                return 1
            with handle:
                cat(handle, out)
    except OSError as err:
        print(err, file=sys.stderr)
        return 1
    finally:
        out.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())