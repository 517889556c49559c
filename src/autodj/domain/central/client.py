"""
Central service client.

Asks the central server whether updates are available for this
installation and which public IP it sees requests coming from.
"""

import uuid
from pathlib import Path
from typing import Any, Optional

import requests
from loguru import logger

from autodj import __version__
from autodj.core.config import CentralConfig

from .settings import read_settings, write_settings


def get_unique_identifier(settings_path: Optional[Path] = None) -> str:
    """Get this installation's identifier, generating and saving it on first use.

    Args:
        settings_path: Settings file override

    Returns:
        uuid4 string
    """
    settings = read_settings(settings_path)
    if not settings.app_unique_identifier:
        settings.app_unique_identifier = str(uuid.uuid4())
        write_settings(settings, settings_path)
        logger.info(f"Generated installation id {settings.app_unique_identifier}")
    return settings.app_unique_identifier


def check_for_updates(
    config: CentralConfig,
    version: Optional[str] = None,
    is_docker: bool = False,
    environment: str = "production",
    settings_path: Optional[Path] = None,
) -> Optional[Any]:
    """Ping the central server for updates and return them if there are any.

    Args:
        config: [central] configuration
        version: Commit hash of the running build, if known
        is_docker: Whether this installation runs in Docker
        environment: Application environment name
        settings_path: Settings file override

    Returns:
        The server's "updates" payload, or None if there are none or the
        request failed
    """
    if not config.enabled:
        logger.debug("Central service disabled; skipping update check")
        return None

    request_body: dict[str, Any] = {
        "id": get_unique_identifier(settings_path),
        "is_docker": is_docker,
        "environment": environment,
        "release_channel": config.release_channel,
    }
    if version:
        request_body["version"] = version
    else:
        request_body["release"] = __version__

    try:
        response = requests.post(
            f"{config.base_url}/api/update",
            json=request_body,
            timeout=config.timeout_seconds,
        )
        response.raise_for_status()
        update_data = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.error(f"Error checking for updates: {e}")
        return None

    if not isinstance(update_data, dict):
        logger.error(f"Unexpected update response: {update_data!r}")
        return None
    return update_data.get("updates")


def get_ip(
    config: CentralConfig,
    cached: bool = True,
    settings_path: Optional[Path] = None,
) -> Optional[str]:
    """Get this installation's likely public-facing IP.

    Args:
        config: [central] configuration
        cached: Use (and store) the remembered IP instead of always asking
        settings_path: Settings file override

    Returns:
        IP address string, or None if it could not be determined
    """
    settings = read_settings(settings_path)
    ip = settings.external_ip if cached else None
    if ip:
        return ip

    if not config.enabled:
        logger.debug("Central service disabled; cannot look up external IP")
        return None

    try:
        response = requests.get(f"{config.base_url}/ip", timeout=config.timeout_seconds)
        response.raise_for_status()
        body = response.json()
        ip = body.get("ip") if isinstance(body, dict) else None
    except (requests.RequestException, ValueError) as e:
        logger.error(f"Could not fetch remote IP: {e}")
        ip = None

    if ip and cached:
        settings.external_ip = ip
        write_settings(settings, settings_path)

    return ip
