"""Minimal formatter understanding %d %l %x %p %s %c and %%."""

from __future__ import annotations

import operator
from typing import Any, Iterator

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF


def _signed32(value: int) -> int:
    value &= _MASK32
    return value - (1 << 32) if value >= 1 << 31 else value


def _take(values: Iterator[Any], spec: str) -> Any:
    try:
        return next(values)
    except StopIteration:
        raise ValueError(f"missing argument for %{spec}") from None


def xformat(fmt: str, *args: Any) -> str:
    """Format ``args`` into ``fmt``.

    Integers are truncated to 32 bits (%d signed, %l and %x unsigned; %x in
    upper case); %p prints 64 bits as 16 hex digits. Unknown conversions are
    printed as written and a lone trailing % is dropped.
    """
    values = iter(args)
    out = []
    chars = iter(fmt)
    for char in chars:
        if char != "%":
            out.append(char)
            continue
        spec = next(chars, None)
        if spec is None:
            break
        if spec == "d":
            out.append(str(_signed32(operator.index(_take(values, spec)))))
        elif spec == "l":
            out.append(str(operator.index(_take(values, spec)) & _MASK32))
        elif spec == "x":
            out.append(format(operator.index(_take(values, spec)) & _MASK32, "X"))
        elif spec == "p":
            out.append("0x" + format(operator.index(_take(values, spec)) & _MASK64, "016X"))
        elif spec == "s":
            value = _take(values, spec)
            out.append("(null)" if value is None else str(value))
        elif spec == "c":
            value = _take(values, spec)
            if isinstance(value, str):
                if len(value) != 1:
                    raise ValueError("%c needs a single character")
                out.append(value)
            else:
                out.append(chr(operator.index(value) & 0xFF))
        elif spec == "%":
            out.append("%")
        else:
            out.append("%" + spec)
    return "".join(out)