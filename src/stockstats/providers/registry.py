"""Quote provider registry."""

import logging

from stockstats.config_loader import AppConfig
from stockstats.constants import ProviderName
from stockstats.providers.base import QuoteProvider
from stockstats.providers.sim import SimQuoteProvider

logger = logging.getLogger(__name__)


def _yahoo(config: AppConfig) -> QuoteProvider:
    from stockstats.providers.yahoo import YahooQuoteProvider

    return YahooQuoteProvider()


def _sim(config: AppConfig) -> QuoteProvider:
    return SimQuoteProvider(config.provider.sim)


PROVIDER_MAP = {
    ProviderName.YAHOO: _yahoo,
    ProviderName.SIM: _sim,
}


def get_available_providers() -> list[str]:
    """Return list of available provider names."""
    return [p.value for p in PROVIDER_MAP]


def get_provider(config: AppConfig) -> QuoteProvider:
    """
    Factory to instantiate the configured provider.

    Raises:
        ValueError: If provider name is unknown.
    """
    name = config.provider.name

    factory = PROVIDER_MAP.get(name)
    if not factory:
        available = get_available_providers()
        logger.error(f"Unknown provider '{name}'. Available: {available}")
        raise ValueError(
            f"Unknown provider: '{name}'. "
            f"Available providers: {', '.join(available)}. "
            f"Check your config.yaml 'provider.name' setting."
        )

    provider = factory(config)
    logger.info(f"Using {provider.__class__.__name__}")
    return provider
