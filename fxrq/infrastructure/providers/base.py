from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from fxrq.domain.models.currency import Quote


@runtime_checkable
class RateProvider(Protocol):
	"""Anything that can quote base -> targets for an amount."""

	@property
	def name(self) -> str: ...

	def quote(self, base: str, targets: Sequence[str], amount: str) -> Quote: ...

	def close(self) -> None: ...
