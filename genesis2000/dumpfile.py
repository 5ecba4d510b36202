"""Parser for the csh-style dump written by the Genesis ``info`` command.

The host writes one ``set NAME = value`` assignment per line, for example::

    set gNUM_ROWS = '30'
    set gCOLcol       = ('1'    '2'     '3'     '4'     '5'    )
    set gCOLstep_name = ('orig' ''      ''      ''      ''     )
    set gATTRname = ()

Scalars go to ``single_values`` and parenthesised lists to ``array_values``.
Lines that are not assignments are skipped. When a name is assigned more
than once the last assignment wins, whichever shape it has.

Array elements are whatever sits between successive quote pairs; embedded
quotes and escapes are not supported. A quoted scalar runs from the first
quote to the last one on the line, so a value that itself ends in a quote
cannot be told apart from its delimiter. Nothing may follow the closing quote
except whitespace: ``set gX = 'a'b`` is skipped rather than read as ``a``.

Parentheses without any quote inside, such as ``()`` or ``(abc)``, are an
empty array.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .errors import DumpFileError

_NAME = r"[A-Za-z_][A-Za-z0-9_]*"
_PREFIX = rf"^set\s+({_NAME})\s*=\s*"

_EMPTY_ARRAY_RE = re.compile(_PREFIX + r"\([^']*\)\s*$")
_ARRAY_RE = re.compile(_PREFIX + r"\('(.*)'\s*\)\s*$")
_QUOTED_RE = re.compile(_PREFIX + r"'(.*)'\s*$")
_UNQUOTED_RE = re.compile(_PREFIX + r"([^'\s(][^'\s]*)\s*$")
_BARE_RE = re.compile(_PREFIX + r"$")
_ELEMENT_SPLIT_RE = re.compile(r"'\s+'")

Value = Union[str, List[str]]


@dataclass(frozen=True)
class DumpEntry:
    name: str
    value: Value

    @property
    def is_array(self) -> bool:
        return isinstance(self.value, list)


@dataclass
class DumpResult:
    single_values: Dict[str, str] = field(default_factory=dict)
    array_values: Dict[str, List[str]] = field(default_factory=dict)

    def add(self, entry: DumpEntry) -> None:
        if entry.is_array:
            self.single_values.pop(entry.name, None)
            self.array_values[entry.name] = list(entry.value)
        else:
            self.array_values.pop(entry.name, None)
            self.single_values[entry.name] = str(entry.value)


def parse_array_value(line: str) -> Optional[Tuple[str, List[str]]]:
    match = _EMPTY_ARRAY_RE.match(line)
    if match:
        return match.group(1), []
    match = _ARRAY_RE.match(line)
    if match:
        return match.group(1), _ELEMENT_SPLIT_RE.split(match.group(2))
    return None


def parse_single_value(line: str) -> Optional[Tuple[str, str]]:
    for pattern in (_QUOTED_RE, _UNQUOTED_RE):
        match = pattern.match(line)
        if match:
            return match.group(1), match.group(2)
    match = _BARE_RE.match(line)
    if match:
        return match.group(1), ""
    return None


def parse_line(line: str) -> Optional[DumpEntry]:
    """Classify one dump line, or return ``None`` when it is not an assignment."""
    line = line.rstrip("\r\n")
    # Arrays first: the unquoted scalar form would otherwise swallow "(".
    array = parse_array_value(line)
    if array is not None:
        return DumpEntry(*array)
    single = parse_single_value(line)
    if single is not None:
        return DumpEntry(*single)
    return None


def parse_dump(lines: Iterable[str]) -> DumpResult:
    result = DumpResult()
    for line in lines:
        entry = parse_line(line)
        if entry is not None:
            result.add(entry)
    return result


def parse_dump_text(text: str) -> DumpResult:
    return parse_dump(text.splitlines())


def parse_dump_file(path: Union[str, Path], *, encoding: str = "utf-8") -> DumpResult:
    try:
        with open(path, "r", encoding=encoding, errors="replace") as handle:
            return parse_dump(handle)
    except OSError as exc:
        raise DumpFileError(f"cannot read info dump {path}: {exc}") from exc
