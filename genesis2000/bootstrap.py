"""Pick a transport for the current process and open a session on it."""

from __future__ import annotations

import logging
import sys
from typing import Mapping, Optional, TextIO

from .config import InfoConfig, TransportConfig
from .session import GenesisSession
from .transport import PipeTransport, SocketTransport, Transport

LOGGER = logging.getLogger("genesis2000.bootstrap")


def is_interactive(stream: Optional[TextIO] = None) -> bool:
    """True when ``stream`` (stdout by default) is attached to a console.

    A script started from a terminal talks to Genesis over TCP; one launched
    by Genesis itself has its stdout piped back to the host.
    """
    stream = sys.stdout if stream is None else stream
    isatty = getattr(stream, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except ValueError:
        # closed stream
        return False


def open_transport(
    interactive: bool,
    transport_config: Optional[TransportConfig] = None,
) -> Transport:
    config = transport_config or TransportConfig()
    if interactive:
        LOGGER.info("Genesis script is running in interactive mode")
        return SocketTransport(config)
    LOGGER.debug("Genesis script is running over stdio pipes")
    return PipeTransport(encoding=config.encoding)


def open_session(
    *,
    interactive: Optional[bool] = None,
    transport_config: Optional[TransportConfig] = None,
    info_config: Optional[InfoConfig] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> GenesisSession:
    """Open a session the way a Genesis script expects.

    ``interactive`` defaults to :func:`is_interactive`. When ``info_config``
    is omitted it is taken from ``GENESIS_DIR``; if that is unset the session
    still opens but :meth:`GenesisSession.info` will refuse to run.
    """
    if interactive is None:
        interactive = is_interactive()
    if info_config is None:
        info_config = InfoConfig.from_environ(environ, required=False)
        if info_config is None:
            LOGGER.debug("GENESIS_DIR not set; info queries disabled")
    transport = open_transport(interactive, transport_config)
    return GenesisSession(transport, interactive=interactive, info_config=info_config)
