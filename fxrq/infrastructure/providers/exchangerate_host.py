import json
import logging
import time
from collections.abc import Sequence
from decimal import Decimal
from typing import Any

import httpx

from fxrq.domain.exceptions.currency import DecodeError, NetworkError, ProviderError
from fxrq.domain.models.currency import Quote

logger = logging.getLogger(__name__)


class ExchangeRateHostProvider:
	URL_TEMPLATE = 'https://api.exchangerate.host/latest?base={base}&symbols={symbols}&amount={amount}'

	def __init__(
		self,
		api_key: str = '',
		proxy_url: str = '',
		client: httpx.Client | None = None,
		timeout: float = 10.0,
		strict: bool = False,
	):
		self.api_key = api_key
		self.proxy_url = proxy_url
		self.strict = strict
		self._client = client or httpx.Client(timeout=timeout, proxy=proxy_url or None)

	@property
	def name(self) -> str:
		return 'exchangerate.host'

	def build_url(self, base: str, targets: Sequence[str], amount: str) -> str:
		# components are trusted ISO codes and a decimal token, no escaping
		url = self.URL_TEMPLATE.format(base=base, symbols=','.join(targets), amount=amount)
		if self.api_key:
			url += f'&access_key={self.api_key}'
		return url

	def _request(self, url: str) -> dict[str, Any]:
		start_time = time.perf_counter()
		try:
			response = self._client.get(url)
			response_time_ms = int((time.perf_counter() - start_time) * 1000)
			logger.debug(f'{self.name} answered HTTP {response.status_code} in {response_time_ms}ms')
			response.raise_for_status()
		except httpx.HTTPStatusError as e:
			raise NetworkError(
				f'exchangerate.host HTTP error {e.response.status_code}: {e.response.text[:200]}'
			) from e
		except httpx.RequestError as e:
			raise NetworkError(f'exchangerate.host request failed: {e.__class__.__name__}: {e}') from e

		try:
			data = json.loads(response.content, parse_float=Decimal)
		except ValueError as e:
			raise DecodeError(f'exchangerate.host response parsing error: {str(e)}') from e

		if not isinstance(data, dict):
			raise DecodeError(f'exchangerate.host response is not an object: {type(data).__name__}')
		return data

	def quote(self, base: str, targets: Sequence[str], amount: str) -> Quote:
		"""
		Quote amount of base in every target.

		Unless the provider is strict, network and decoding failures are logged
		and an empty Quote (no date, no rates) is returned instead.
		"""
		logger.debug(f'Requesting {base} -> {",".join(targets)} for amount {amount}')
		try:
			data = self._request(self.build_url(base, targets, amount))
		except ProviderError as e:
			if self.strict:
				raise
			logger.error(str(e))
			return Quote(date='', base_iso=base, target_isos=tuple(targets))

		return self._to_quote(data, base, targets)

	def _to_quote(self, data: dict[str, Any], base: str, targets: Sequence[str]) -> Quote:
		date = data.get('date')
		if not isinstance(date, str):
			logger.warning(f'Response date is not a string: {date!r}')
			date = ''

		rates: dict[str, Decimal | int] = {}
		raw_rates = data.get('rates')
		if isinstance(raw_rates, dict):
			for iso, value in raw_rates.items():
				if isinstance(value, Decimal | int) and not isinstance(value, bool):
					rates[iso] = value
				else:
					logger.warning(f'Skipping non-numeric rate for {iso}: {value!r}')
		else:
			logger.warning(f'Response rates is not an object: {raw_rates!r}')

		# the response's own base is not trusted, the request is echoed
		return Quote(date=date, base_iso=base, target_isos=tuple(targets), rates=rates)

	def close(self) -> None:
		self._client.close()

	def __enter__(self) -> 'ExchangeRateHostProvider':
		return self

	def __exit__(self, *exc_info) -> None:
		self.close()
