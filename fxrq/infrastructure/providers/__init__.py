from .base import RateProvider
from .exchangerate_host import ExchangeRateHostProvider
from .registry import PROVIDERS, create_provider

__all__ = ['PROVIDERS', 'ExchangeRateHostProvider', 'RateProvider', 'create_provider']
