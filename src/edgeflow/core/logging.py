"""Logging setup for edgeflow.

Every module logs through `get_logger(LogComponent.X)`; nothing is configured
at import time. Applications (and the CLI) call `configure_logging` once.
"""

import logging
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

_RESET = '\033[0m'
_DIM = '\033[2m'

LEVEL_STYLES = {
    'DEBUG': _DIM,
    'INFO': '\033[94m',                 # Blue
    'WARNING': '\033[93m',              # Yellow
    'ERROR': '\033[91m',                # Red
    'CRITICAL': '\033[91m\033[1m',      # Bold red
}

PLAIN_FORMAT = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"

PRETTY_FORMAT = (
    f"{_DIM}%(asctime)s{_RESET} │ "
    f"%(colored_level)-30s │ "
    f"{_DIM}%(name)s{_RESET} │ "
    f"%(message)s"
)


class PrettyFormatter(logging.Formatter):
    """Colors the level name and rules off warnings and errors."""

    def format(self, record):
        style = LEVEL_STYLES.get(record.levelname, _RESET)
        record.colored_level = f"{style}{record.levelname}{_RESET}"

        message = super().format(record)
        if record.levelno >= logging.WARNING:
            message = f"{message}\n{_DIM}{'─' * 80}{_RESET}"
        return message

    def formatTime(self, record, datefmt=None):
        return datetime.fromtimestamp(record.created).strftime(datefmt or '%H:%M:%S')


class LogComponent(str, Enum):
    """Named loggers used across the package."""
    ENGINE = "edgeflow.engine"
    NODES = "edgeflow.nodes"
    REGISTRY = "edgeflow.registry"
    CONTEXT = "edgeflow.context"
    DEFINITION = "edgeflow.definition"
    CLI = "edgeflow.cli"


class LogLevel(IntEnum):
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


class LoggingSettings(BaseModel):
    """
    Resolved logging configuration.

    Attributes:
        level: Root logger level
        component_levels: Per-component levels; components left out get `level`
        pretty: Colored console output
        log_file: Optional file that receives plain (uncolored) records
    """
    level: LogLevel = Field(default=LogLevel.INFO)
    component_levels: Dict[LogComponent, LogLevel] = Field(default_factory=dict)
    pretty: bool = Field(default=True)
    log_file: Optional[str] = Field(default=None)

    def level_for(self, component: LogComponent) -> LogLevel:
        return self.component_levels.get(component, self.level)

    def handlers(self) -> List[logging.Handler]:
        console = logging.StreamHandler()
        console.setFormatter(
            PrettyFormatter(PRETTY_FORMAT) if self.pretty else logging.Formatter(PLAIN_FORMAT)
        )
        handlers: List[logging.Handler] = [console]

        if self.log_file:
            file_handler = logging.FileHandler(self.log_file)
            file_handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
            handlers.append(file_handler)
        return handlers


def configure_logging(
    default_level: LogLevel = LogLevel.INFO,
    component_levels: Optional[Mapping[LogComponent, LogLevel]] = None,
    pretty: bool = True,
    log_file: Optional[str] = None
) -> LoggingSettings:
    """Install handlers on the root logger and set component levels.

    Existing root handlers are replaced, so calling this twice does not
    duplicate output.

    Args:
        default_level: Root level, also used for components not listed
        component_levels: Per-component overrides
        pretty: Colored console output
        log_file: Also write plain records to this path

    Returns:
        The applied settings
    """
    settings = LoggingSettings(
        level=default_level,
        component_levels=dict(component_levels or {}),
        pretty=pretty,
        log_file=log_file,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(settings.level.value)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in settings.handlers():
        root_logger.addHandler(handler)

    for component in LogComponent:
        logging.getLogger(component.value).setLevel(settings.level_for(component).value)
    return settings


def get_logger(component: LogComponent) -> logging.Logger:
    return logging.getLogger(component.value)


def log_state(logger: logging.Logger, state: Mapping[str, Any], prefix: str = "") -> None:
    """Log a (nested) mapping one key per line at DEBUG."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    for key, value in state.items():
        if isinstance(value, Mapping):
            logger.debug(f"{prefix}{key}:")
            log_state(logger, value, prefix + "  ")
        else:
            logger.debug(f"{prefix}{key}: {value!r}")
