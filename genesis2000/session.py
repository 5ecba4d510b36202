"""Script session: command methods, result state and the info query."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .commands import CommandKind, Reply, send_command
from .config import GENESIS_DIR_ENV, InfoConfig
from .dumpfile import DumpResult, parse_dump_file
from .errors import DumpFileError, EnvironmentConfigError, TransportError
from .info import InfoRequest, build_info_command
from .transport import Transport

LOGGER = logging.getLogger("genesis2000.session")


@dataclass
class SessionState:
    """Outcome of the most recently completed command."""

    status: str = ""
    read_answer: str = ""
    command_answer: str = ""
    mouse_answer: str = ""
    pause_answer: str = ""
    single_values: Dict[str, str] = field(default_factory=dict)
    array_values: Dict[str, List[str]] = field(default_factory=dict)

    def clear(self) -> None:
        self.status = ""
        self.read_answer = ""
        self.command_answer = ""
        self.mouse_answer = ""
        self.pause_answer = ""
        # fresh maps; results handed out earlier stay untouched
        self.single_values = {}
        self.array_values = {}

    def apply(self, reply: Reply) -> None:
        for slot, value in reply.as_dict().items():
            setattr(self, slot, value)


@dataclass(frozen=True)
class InfoReply:
    """Both outputs of an info query: the COM reply and the parsed dump file."""

    reply: Reply
    dump: DumpResult

    @property
    def status(self) -> str:
        return self.reply.as_dict().get("status", "")


class GenesisSession:
    """Drives one Genesis host over an exclusively owned transport.

    Commands are strictly sequential: each call writes one request and reads
    all of its reply lines before returning. Use the session as a context
    manager so the host receives CLOSEDOWN on every exit path when running
    interactively.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        interactive: bool = False,
        info_config: Optional[InfoConfig] = None,
    ) -> None:
        self.transport = transport
        self.interactive = interactive
        self.info_config = info_config
        self.state = SessionState()
        self._closed = False
        self._broken = False

    def __enter__(self) -> "GenesisSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Result fields
    # ------------------------------------------------------------------
    @property
    def status(self) -> str:
        return self.state.status

    @property
    def read_answer(self) -> str:
        return self.state.read_answer

    @property
    def command_answer(self) -> str:
        return self.state.command_answer

    @property
    def mouse_answer(self) -> str:
        return self.state.mouse_answer

    @property
    def pause_answer(self) -> str:
        return self.state.pause_answer

    @property
    def single_values(self) -> Dict[str, str]:
        return self.state.single_values

    @property
    def array_values(self) -> Dict[str, List[str]]:
        return self.state.array_values

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def execute(self, kind: CommandKind, payload: str = "") -> Reply:
        """Send one command and record its reply in :attr:`state`."""
        if self._closed:
            raise TransportError("session closed")
        if self._broken:
            raise TransportError("session transport failed earlier; start a new session")
        self.state.clear()
        try:
            reply = send_command(self.transport, kind, payload)
        except TransportError:
            self._broken = True
            raise
        self.state.apply(reply)
        return reply

    def von(self) -> None:
        self.execute(CommandKind.VERBOSE_ON)

    def vof(self) -> None:
        self.execute(CommandKind.VERBOSE_OFF)

    def su_on(self) -> None:
        self.execute(CommandKind.SUPPRESS_ON)

    def su_off(self) -> None:
        self.execute(CommandKind.SUPPRESS_OFF)

    def com(self, command: str) -> str:
        self.execute(CommandKind.COM, command)
        return self.state.command_answer

    def aux(self, command: str) -> str:
        self.execute(CommandKind.AUX, command)
        return self.state.command_answer

    def pause(self, message: str) -> str:
        self.execute(CommandKind.PAUSE, message)
        return self.state.pause_answer

    def mouse(self, prompt: str) -> str:
        self.execute(CommandKind.MOUSE, prompt)
        return self.state.mouse_answer

    # ------------------------------------------------------------------
    # Info query
    # ------------------------------------------------------------------
    def info(self, request: Optional[InfoRequest] = None, **params) -> InfoReply:
        """Ask the host to dump entity information and load it.

        Either pass an :class:`InfoRequest` or its fields as keyword
        arguments, e.g. ``info(entity_type="matrix", entity_path="job/matrix")``.
        The dump file is removed before this returns.
        """
        if request is None:
            request = InfoRequest(**params)
        elif params:
            raise TypeError("pass either an InfoRequest or keyword parameters, not both")
        config = self.info_config
        if config is None:
            raise EnvironmentConfigError(f"{GENESIS_DIR_ENV} is not set; cannot place the info dump")
        out_file = config.dump_path
        payload = build_info_command(request, out_file, default_units=config.default_units)
        reply = self.execute(CommandKind.INFO, payload)
        dump = self._consume_dump(out_file)
        self.state.single_values = dict(dump.single_values)
        self.state.array_values = dict(dump.array_values)
        LOGGER.debug(
            "info dump %s: %d values, %d arrays",
            out_file,
            len(dump.single_values),
            len(dump.array_values),
        )
        return InfoReply(reply=reply, dump=dump)

    def get_info_single_value(self, name: str) -> Optional[str]:
        return self.state.single_values.get(name)

    def get_info_array_value(self, name: str) -> Optional[List[str]]:
        return self.state.array_values.get(name)

    def format_info_values(self) -> str:
        """Render the last info result as ``name => value`` lines."""
        lines = [f"{name} => {value}" for name, value in self.state.single_values.items()]
        lines.extend(f"{name} => {values!r}" for name, values in self.state.array_values.items())
        return "\n".join(lines)

    def _consume_dump(self, path: str) -> DumpResult:
        try:
            dump = parse_dump_file(path, encoding=self.transport.encoding)
        except DumpFileError:
            try:
                _remove_dump(path, missing_ok=True)
            except DumpFileError as cleanup_exc:
                LOGGER.warning("%s", cleanup_exc)
            raise
        _remove_dump(path)
        return dump

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------
    def close(self) -> None:
        """Release the transport, sending CLOSEDOWN first in interactive mode.

        Safe to call more than once; CLOSEDOWN is sent at most once.
        """
        if self._closed:
            return
        self._closed = True
        try:
            if self.interactive and not self._broken:
                self.state.clear()
                try:
                    send_command(self.transport, CommandKind.CLOSEDOWN)
                except TransportError as exc:
                    LOGGER.warning("CLOSEDOWN not delivered: %s", exc)
        finally:
            self.transport.close()
            LOGGER.info("session closed")


def _remove_dump(path: str, *, missing_ok: bool = False) -> None:
    try:
        os.remove(path)
    except FileNotFoundError as exc:
        if missing_ok:
            return
        raise DumpFileError(f"info dump {path} vanished before it could be removed") from exc
    except OSError as exc:
        raise DumpFileError(f"cannot remove info dump {path}: {exc}") from exc
