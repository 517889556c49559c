"""Central service domain - update checks and public IP lookup."""

from .client import check_for_updates, get_ip, get_unique_identifier
from .settings import AppSettings, read_settings, write_settings

__all__ = [
    "check_for_updates",
    "get_ip",
    "get_unique_identifier",
    "AppSettings",
    "read_settings",
    "write_settings",
]
