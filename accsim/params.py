"""Loading of ``key,value`` parameter files."""

from __future__ import annotations

import re
import sys
from os import PathLike

_NUMBER_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _parse_number(text: str) -> float | None:
    """Read a leading floating-point number, ignoring whatever follows it."""
    match = _NUMBER_PREFIX.match(text)
    if match is None:
        return None
    return float(match.group(1))


def load_parameters(filename: str | PathLike[str]) -> dict[str, float]:
    """Read ``name,value`` lines into a mapping.

    Lines without a comma or without a readable number after it are skipped.
    A later line overrides an earlier one with the same name. A file that
    cannot be opened yields an empty mapping and a message on stderr.
    """
    parameters: dict[str, float] = {}
    try:
        with open(filename, encoding="utf-8", errors="replace") as infile:
            for line in infile:
                key, comma, rest = line.rstrip("\n").partition(",")
                if not comma:
                    continue
                value = _parse_number(rest)
                if value is not None:
                    parameters[key] = value
    except OSError:
        sys.stderr.write(f"Unable to open file {filename}")
        sys.stderr.flush()
    return parameters