"""Core configuration and utilities for the Ward Handover backend."""

from ward_handover.core.config import settings
from ward_handover.core.logging import get_logger, setup_logging

__all__ = ["settings", "setup_logging", "get_logger"]
