import logging
from typing import Optional

from .base import UpstreamClient
from .carbonintensity import CarbonClient, PROVIDER_NAME as CARBON_PROVIDER
from .coronavirus import CovidClient, PROVIDER_NAME as COVID_PROVIDER
from ..config import UpstreamConfig, config
from ..regions import DEFAULT_DIRECTORY, RegionDirectory

logger = logging.getLogger(__name__)


def get_providers(
    upstream: Optional[UpstreamConfig] = None, directory: RegionDirectory = DEFAULT_DIRECTORY
) -> dict[str, UpstreamClient]:
    """Initialize and return both upstream clients."""

    upstream = upstream or config.upstream

    providers: dict[str, UpstreamClient] = {
        CARBON_PROVIDER: CarbonClient(upstream),
        COVID_PROVIDER: CovidClient(upstream, directory),
    }
    logger.debug(
        "Providers initialized: %s (%s), %s (%s)",
        CARBON_PROVIDER,
        upstream.carbon_base_url,
        COVID_PROVIDER,
        upstream.covid_base_url,
    )

    return providers
