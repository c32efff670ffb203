"""fedstore logging — hexagonal logging port and the structlog adapter."""

from fedstore.logging.port import LoggingPort
from fedstore.logging.structlog_adapter import StructlogAdapter

__all__ = ["LoggingPort", "StructlogAdapter"]
