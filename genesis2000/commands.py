"""Command kinds, request framing and the reply arity table."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from .transport import Transport

LOGGER = logging.getLogger("genesis2000.commands")

DIR_PREFIX = "@%#%@"

# Host revisions disagree on AUX: one answers status and read answer only,
# another sends a third line with the auxiliary answer. Confirm against the
# target host before changing; 3 makes AUX block on one more read.
AUX_REPLY_LINES = 2


class CommandKind(Enum):
    VERBOSE_ON = "toggle-verbose-on"
    VERBOSE_OFF = "toggle-verbose-off"
    SUPPRESS_ON = "suppress-on"
    SUPPRESS_OFF = "suppress-off"
    PAUSE = "pause"
    MOUSE = "mouse"
    COM = "generic-command"
    AUX = "auxiliary-command"
    INFO = "structured-info-query"
    CLOSEDOWN = "shutdown"


@dataclass(frozen=True)
class ReplyRule:
    """Wire name of a command kind and the result slots its reply lines fill.

    ``slots`` names the session fields that receive reply lines, in order; the
    number of slots is the number of lines read. ``mirror`` copies
    ``read_answer`` into ``command_answer`` once the lines are in.
    """

    wire_name: str
    slots: Tuple[str, ...] = ()
    mirror: bool = False

    @property
    def arity(self) -> int:
        return len(self.slots)


def _aux_rule(lines: int = AUX_REPLY_LINES) -> ReplyRule:
    if lines not in (2, 3):
        raise ValueError(f"AUX replies have 2 or 3 lines, not {lines}")
    if lines == 3:
        return ReplyRule("AUX", ("status", "read_answer", "command_answer"))
    return ReplyRule("AUX", ("status", "read_answer"), mirror=True)


REPLY_RULES: Dict[CommandKind, ReplyRule] = {
    CommandKind.VERBOSE_ON: ReplyRule("VON"),
    CommandKind.VERBOSE_OFF: ReplyRule("VOF"),
    CommandKind.SUPPRESS_ON: ReplyRule("SU_ON"),
    CommandKind.SUPPRESS_OFF: ReplyRule("SU_OFF"),
    CommandKind.CLOSEDOWN: ReplyRule("CLOSEDOWN"),
    CommandKind.COM: ReplyRule("COM", ("status", "read_answer"), mirror=True),
    CommandKind.AUX: _aux_rule(),
    CommandKind.PAUSE: ReplyRule("PAUSE", ("status", "read_answer", "pause_answer")),
    CommandKind.MOUSE: ReplyRule("MOUSE", ("status", "read_answer", "mouse_answer")),
    CommandKind.INFO: ReplyRule("COM", ("status", "read_answer"), mirror=True),
}


def reply_arity(kind: CommandKind) -> int:
    return REPLY_RULES[kind].arity


def frame_request(kind: CommandKind, payload: str = "", *, encoding: str = "utf-8") -> bytes:
    """Build the single request line for ``kind``.

    The payload is opaque; an embedded newline would split the request on the
    wire and is rejected.
    """
    if "\n" in payload:
        raise ValueError("payload must be a single line")
    rule = REPLY_RULES[kind]
    return f"{DIR_PREFIX}{rule.wire_name} {payload}\n".encode(encoding)


@dataclass(frozen=True)
class Reply:
    """Reply lines consumed for one command, keyed by result slot."""

    kind: CommandKind
    values: Tuple[Tuple[str, str], ...] = ()

    def as_dict(self) -> Dict[str, str]:
        result = dict(self.values)
        if REPLY_RULES[self.kind].mirror:
            result["command_answer"] = result.get("read_answer", "")
        return result

    @property
    def lines(self) -> Tuple[str, ...]:
        return tuple(value for _, value in self.values)


def send_command(transport: Transport, kind: CommandKind, payload: str = "") -> Reply:
    """Write one request and consume exactly its reply lines."""
    rule = REPLY_RULES[kind]
    data = frame_request(kind, payload, encoding=transport.encoding)
    LOGGER.debug("-> %s %s", rule.wire_name, payload)
    transport.write(data)
    values = []
    for slot in rule.slots:
        line = transport.read_line()
        LOGGER.debug("<- %s: %s", slot, line)
        values.append((slot, line))
    return Reply(kind=kind, values=tuple(values))
