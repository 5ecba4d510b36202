"""Request model and payload builder for the ``info`` query."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, List, Mapping, Optional

from .config import DEFAULT_UNITS


class InfoParam(Enum):
    ENTITY_TYPE = "entity_type"
    ENTITY_PATH = "entity_path"
    DATA_TYPE = "data_type"
    PARAMETERS = "parameters"
    SERIAL_NUMBER = "serial_number"
    OPTIONS = "options"
    HELP = "help"
    UNITS = "units"


# Order in which argument fragments appear after ``args=``.
_ARG_FLAGS = (
    ("entity_type", "-t"),
    ("entity_path", "-e"),
    ("data_type", "-d"),
    ("parameters", "-p"),
    ("serial_number", "-s"),
    ("options", "-o"),
)


@dataclass
class InfoRequest:
    entity_type: Optional[str] = None
    entity_path: Optional[str] = None
    data_type: Optional[str] = None
    parameters: Optional[str] = None
    serial_number: Optional[str] = None
    options: Optional[str] = None
    help: bool = False
    units: Optional[str] = None

    @classmethod
    def from_params(cls, params: Mapping[Any, Any]) -> "InfoRequest":
        """Build a request from ``{InfoParam | str: value}``."""
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in params.items():
            name = key.value if isinstance(key, InfoParam) else str(key)
            if name not in known:
                raise ValueError(f"unknown info parameter: {key!r}")
            if name == "help":
                # help is a bare flag; presence enables it
                values[name] = value is not False
            else:
                values[name] = None if value is None else str(value)
        return cls(**values)

    def arg_fragments(self) -> List[str]:
        fragments = []
        for name, flag in _ARG_FLAGS:
            value = getattr(self, name)
            if value is not None:
                fragments.append(f"{flag} {value}")
        if self.help:
            fragments.append("-help")
        return fragments


def build_info_command(
    request: InfoRequest,
    out_file: str,
    *,
    default_units: str = DEFAULT_UNITS,
) -> str:
    """Payload for the COM request that makes the host dump ``request`` to ``out_file``."""
    units = request.units or default_units
    args = " ".join(request.arg_fragments() + ["-m script"])
    return f"info,out_file={out_file},write_mode=replace,units={units},args={args}"
