"""Configuration dataclasses and logging setup for the genesis2000 client."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from .errors import EnvironmentConfigError

GENESIS_DIR_ENV = "GENESIS_DIR"
LOG_LEVEL_ENV = "GENESIS_LOG"

DEFAULT_PORT = 56753
DEFAULT_UNITS = "mm"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class TransportConfig:
    host: str = "127.0.0.1"
    port: int = DEFAULT_PORT
    connect_timeout: float = 5.0
    encoding: str = "utf-8"


@dataclass
class InfoConfig:
    """Where the host should write info dumps for this process.

    ``base_dir`` is the Genesis installation root; dumps land in
    ``<base_dir>/share/tmp/info_csh.<pid>``.
    """

    base_dir: str
    pid: int = field(default_factory=os.getpid)
    default_units: str = DEFAULT_UNITS

    @property
    def dump_path(self) -> str:
        return f"{self.base_dir}/share/tmp/info_csh.{self.pid}"

    @classmethod
    def from_environ(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        required: bool = True,
    ) -> Optional["InfoConfig"]:
        env = os.environ if environ is None else environ
        base_dir = env.get(GENESIS_DIR_ENV)
        if not base_dir:
            if required:
                raise EnvironmentConfigError(f"{GENESIS_DIR_ENV} is not set")
            return None
        return cls(base_dir=str(Path(base_dir)))


def configure_logging(level: Optional[str] = None) -> None:
    """Route client logging to stderr.

    stdout is the reply channel when the host runs the script through pipes,
    so nothing may log there.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "WARNING")
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
    )
