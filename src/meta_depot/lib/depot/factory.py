"""Select and construct the depot backend from application settings."""

from loguru import logger

from meta_depot.core.config import ConfigurationError, Settings
from meta_depot.lib.depot.base import Depot
from meta_depot.lib.depot.local import LocalDepot
from meta_depot.lib.depot.webdav import WebDAVDepot


def create_depot(settings: Settings) -> Depot:
    """Create the depot configured by the environment.

    ``LOCAL_DEPOT_PATH`` selects the local backend; otherwise the WebDAV
    depot manager is used and both its URL and token are required.

    Args:
        settings: Application settings.

    Returns:
        A LocalDepot or WebDAVDepot instance.

    Raises:
        ConfigurationError: If a value required by the selected backend is missing.
    """
    if not settings.depot_base_url:
        raise ConfigurationError("DEPOT_BASE_URL", "depot base url")

    if settings.local_depot_path:
        logger.info("Using local depot at {}", settings.local_depot_path)
        return LocalDepot(settings.depot_base_url, settings.local_depot_path)

    if not settings.depot_manager_token:
        raise ConfigurationError("DEPOT_MANAGER_TOKEN", "token for depot manager")
    if not settings.depot_manager_base_url:
        raise ConfigurationError("DEPOT_MANAGER_BASE_URL", "base URL for depot manager")

    logger.info("Using WebDAV depot at {}", settings.depot_manager_base_url)
    return WebDAVDepot(
        settings.depot_base_url,
        settings.depot_manager_base_url,
        token=settings.depot_manager_token,
    )
