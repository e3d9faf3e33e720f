import logging

import httpx

from fxrq.domain.exceptions.currency import ConfigError
from fxrq.domain.models.config import Config

from .base import RateProvider
from .exchangerate_host import ExchangeRateHostProvider

logger = logging.getLogger(__name__)

PROVIDERS: dict[str, type] = {
	'exchangerate.host': ExchangeRateHostProvider,
}


def create_provider(config: Config, timeout: float = 10.0) -> RateProvider:
	try:
		provider_cls = PROVIDERS[config.provider_name]
	except KeyError as e:
		known = ', '.join(sorted(PROVIDERS))
		raise ConfigError(f'unknown endpoint {config.provider_name!r}, expected one of: {known}') from e

	logger.debug(f'Using provider {config.provider_name} (proxy: {config.proxy_url or "none"})')
	try:
		return provider_cls(
			api_key=config.api_key,
			proxy_url=config.proxy_url,
			timeout=timeout,
			strict=config.strict_errors,
		)
	except (ValueError, httpx.InvalidURL) as e:
		raise ConfigError(f'invalid proxy url {config.proxy_url!r}: {e}') from e
