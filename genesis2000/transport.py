"""
Transport layer for the genesis2000 client.

Responsibilities:
    * Own the duplex channel to the Genesis host (TCP socket or stdio pipes).
    * Write framed request bytes.
    * Read reply lines one at a time, blocking until a full line arrives.

Reads never time out; a host that stops answering blocks the caller.
"""

from __future__ import annotations

import logging
import socket
import sys
from dataclasses import dataclass, field
from typing import BinaryIO, Optional

from .config import TransportConfig
from .errors import ConnectionClosedError, TransportError

LOGGER = logging.getLogger("genesis2000.transport")


class Transport:
    """Duplex line channel to the host."""

    encoding: str = "utf-8"
    closed: bool = False

    def write(self, data: bytes) -> None:
        raise NotImplementedError("Transport must implement write()")

    def read_line(self) -> str:
        raise NotImplementedError("Transport must implement read_line()")

    def close(self) -> None:
        self.closed = True

    def _decode_line(self, raw: bytes) -> str:
        if not raw.endswith(b"\n"):
            # EOF before the terminator; partial lines are not recovered.
            raise ConnectionClosedError("host closed the channel while a reply was pending")
        return raw[:-1].decode(self.encoding, errors="replace")


@dataclass
class StreamTransport(Transport):
    """Transport over a pair of binary file objects."""

    reader: BinaryIO
    writer: BinaryIO
    encoding: str = "utf-8"
    closed: bool = field(init=False, default=False)

    def write(self, data: bytes) -> None:
        if self.closed:
            raise TransportError("transport closed")
        try:
            self.writer.write(data)
            self.writer.flush()
        except (OSError, ValueError) as exc:
            raise TransportError(f"write failed: {exc}") from exc

    def read_line(self) -> str:
        if self.closed:
            raise TransportError("transport closed")
        try:
            raw = self.reader.readline()
        except (OSError, ValueError) as exc:
            raise TransportError(f"read failed: {exc}") from exc
        return self._decode_line(raw)


class PipeTransport(StreamTransport):
    """Standard input/output of the current process.

    Used when the host launched this script and talks to it through pipes.
    Closing does not close the process streams.
    """

    def __init__(
        self,
        reader: Optional[BinaryIO] = None,
        writer: Optional[BinaryIO] = None,
        *,
        encoding: str = "utf-8",
    ) -> None:
        super().__init__(
            reader=reader if reader is not None else sys.stdin.buffer,
            writer=writer if writer is not None else sys.stdout.buffer,
            encoding=encoding,
        )


class SocketTransport(Transport):
    """TCP connection to the host's script port."""

    def __init__(self, config: Optional[TransportConfig] = None) -> None:
        self.config = config or TransportConfig()
        self.encoding = self.config.encoding
        self.closed = False
        try:
            sock = socket.create_connection(
                (self.config.host, self.config.port),
                timeout=self.config.connect_timeout,
            )
        except OSError as exc:
            raise TransportError(
                f"connect to Genesis at {self.config.host}:{self.config.port} failed: {exc}"
            ) from exc
        sock.settimeout(None)
        self._sock = sock
        self._rfile = sock.makefile("rb")
        LOGGER.info("connected to Genesis at %s:%s", self.config.host, self.config.port)

    def write(self, data: bytes) -> None:
        if self.closed:
            raise TransportError("transport closed")
        try:
            self._sock.sendall(data)
        except OSError as exc:
            raise TransportError(f"send failed: {exc}") from exc

    def read_line(self) -> str:
        if self.closed:
            raise TransportError("transport closed")
        try:
            raw = self._rfile.readline()
        except OSError as exc:
            raise TransportError(f"recv failed: {exc}") from exc
        return self._decode_line(raw)

    def close(self) -> None:
        if self.closed:
            return
        super().close()
        try:
            self._rfile.close()
            self._sock.close()
        except OSError as exc:
            LOGGER.debug("socket close failed: %s", exc)
