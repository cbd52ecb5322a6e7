from __future__ import annotations

import pathlib
import re
from typing import List, Union

from .vm_errors import NotAnInteger

_INTEGER = re.compile(r"[+-]?[0-9]+")


def parse_program(text: str) -> List[int]:
    """Parse comma-separated signed integers, failing on the first bad token."""
    values: List[int] = []
    for position, token in enumerate(text.split(",")):
        stripped = token.strip()
        if not _INTEGER.fullmatch(stripped):
            raise NotAnInteger(token, position)
        values.append(int(stripped))
    return values


def format_program(values) -> str:
    return ",".join(str(value) for value in values)


def read_program(path: Union[str, pathlib.Path]) -> List[int]:
    data = pathlib.Path(path).read_text(encoding="utf-8")
    return parse_program(data)


__all__ = ["format_program", "parse_program", "read_program"]
