"""
genesis2000 - client binding for Genesis 2000 scripts.

Drives a running Genesis host over its line protocol and loads the dumps the
host writes for ``info`` queries.  Each module has a single responsibility:

    transport.py  → socket / stdio channel, line reads
    commands.py   → command kinds, request framing, reply arity
    info.py       → info request model and payload builder
    dumpfile.py   → parser for "set NAME = value" dump files
    session.py    → command methods, result state, teardown
    bootstrap.py  → transport selection and session construction
    config.py     → configuration dataclasses and logging setup
"""

from .bootstrap import is_interactive, open_session, open_transport  # noqa: F401
from .commands import AUX_REPLY_LINES, REPLY_RULES, CommandKind, Reply, frame_request, reply_arity  # noqa: F401
from .config import InfoConfig, TransportConfig, configure_logging  # noqa: F401
from .dumpfile import DumpEntry, DumpResult, parse_dump, parse_dump_file, parse_line  # noqa: F401
from .errors import (  # noqa: F401
    ConnectionClosedError,
    DumpFileError,
    EnvironmentConfigError,
    GenesisError,
    TransportError,
)
from .info import InfoParam, InfoRequest, build_info_command  # noqa: F401
from .session import GenesisSession, InfoReply, SessionState  # noqa: F401
from .transport import PipeTransport, SocketTransport, StreamTransport, Transport  # noqa: F401

__all__ = [
    "AUX_REPLY_LINES",
    "REPLY_RULES",
    "CommandKind",
    "Reply",
    "frame_request",
    "reply_arity",
    "InfoConfig",
    "TransportConfig",
    "configure_logging",
    "DumpEntry",
    "DumpResult",
    "parse_dump",
    "parse_dump_file",
    "parse_line",
    "GenesisError",
    "TransportError",
    "ConnectionClosedError",
    "EnvironmentConfigError",
    "DumpFileError",
    "InfoParam",
    "InfoRequest",
    "build_info_command",
    "GenesisSession",
    "InfoReply",
    "SessionState",
    "Transport",
    "StreamTransport",
    "PipeTransport",
    "SocketTransport",
    "is_interactive",
    "open_session",
    "open_transport",
]

__version__ = "0.1.0"
