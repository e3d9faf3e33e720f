from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class Currency:
	symbol: str
	iso: str
	region: str
	name: str

	@property
	def label(self) -> str:
		return f'{self.region} - {self.name} - {self.iso} ({self.symbol})'


@dataclass(frozen=True)
class Quote:
	date: str
	base_iso: str
	target_isos: tuple[str, ...]
	rates: dict[str, Decimal | int] = field(default_factory=dict)
