"""Exception hierarchy shared by the genesis2000 client modules."""

from __future__ import annotations


class GenesisError(RuntimeError):
    """Base class for every fatal condition raised by the client."""


class TransportError(GenesisError):
    """Raised when the transport cannot complete an operation."""


class ConnectionClosedError(TransportError):
    """Raised when the host closes the channel while a reply is pending."""


class EnvironmentConfigError(GenesisError):
    """Raised when a required environment value (``GENESIS_DIR``) is missing."""


class DumpFileError(GenesisError):
    """Raised when the info dump file cannot be read or removed."""
