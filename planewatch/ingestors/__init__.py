"""Feed ingestors for Planewatch."""

from .dump1090 import Dump1090JsonIngestor
from .sbs import (
    SBSConfig,
    SBSIngestor,
    SbsMessage,
    build_sbs_config,
    normalize_message,
    parse_sbs_message,
)

__all__ = [
    "Dump1090JsonIngestor",
    "SBSConfig",
    "SBSIngestor",
    "SbsMessage",
    "build_sbs_config",
    "normalize_message",
    "parse_sbs_message",
]
