import csv
import io
import logging
from collections.abc import Iterable, Iterator, Sequence
from importlib import resources
from pathlib import Path
from typing import overload

from pydantic import TypeAdapter, ValidationError

from fxrq.domain.exceptions.currency import CatalogError, UnsupportedFormat
from fxrq.domain.models.currency import Currency

logger = logging.getLogger(__name__)

EMBEDDED_CATALOG = 'currencies.csv'

_json_rows = TypeAdapter(list[list[str]])


def read_csv_rows(stream: Iterable[str], source: str) -> list[list[str]]:
	"""Rows after the header line. Blank lines are skipped."""
	reader = csv.reader(stream)
	try:
		header = next(reader, None)
		if header is None:
			raise CatalogError(f'{source}: empty csv, missing header row')
		return [row for row in reader if row]
	except csv.Error as e:
		raise CatalogError(f'{source}: malformed csv at line {reader.line_num}: {e}') from e


def read_json_rows(raw: str | bytes, source: str) -> list[list[str]]:
	try:
		return _json_rows.validate_json(raw)
	except ValidationError as e:
		first = e.errors()[0]
		raise CatalogError(f"{source}: invalid json catalog: {first['msg']}") from e


def row_to_currency(row: Sequence[str], line: int, source: str) -> Currency:
	if len(row) < 4:
		raise CatalogError(f'{source}: record {line} has {len(row)} fields, expected at least 4')
	symbol, iso, name, region = row[:4]
	return Currency(symbol=symbol, iso=iso, region=region, name=name)


class CurrencyCatalog(Sequence[Currency]):
	"""Read-only, ordered table of currencies in source order."""

	def __init__(self, currencies: Iterable[Currency]):
		self._currencies = tuple(currencies)
		if not self._currencies:
			raise CatalogError('currency catalog is empty')

	@classmethod
	def from_rows(cls, rows: Iterable[Sequence[str]], source: str = '<rows>') -> 'CurrencyCatalog':
		return cls(row_to_currency(row, i, source) for i, row in enumerate(rows, start=1))

	@classmethod
	def load(cls, catalog_file: str = '') -> 'CurrencyCatalog':
		if catalog_file:
			rows = cls._read_file(Path(catalog_file))
			source = catalog_file
		else:
			source = f'embedded:{EMBEDDED_CATALOG}'
			data = resources.files('fxrq.infrastructure.catalog') / 'data' / EMBEDDED_CATALOG
			text = data.read_text(encoding='utf-8')
			rows = read_csv_rows(io.StringIO(text, newline=''), source)

		catalog = cls.from_rows(rows, source)
		logger.debug(f'Loaded {len(catalog)} currencies from {source}')
		return catalog

	@staticmethod
	def _read_file(path: Path) -> list[list[str]]:
		ext = path.suffix
		if ext not in ('.csv', '.json'):
			raise UnsupportedFormat(f'unsupported file type: {ext}')

		try:
			if ext == '.csv':
				with path.open(encoding='utf-8', newline='') as f:
					return read_csv_rows(f, str(path))
			return read_json_rows(path.read_bytes(), str(path))
		except OSError as e:
			raise CatalogError(f'cannot read currency file {path}: {e.strerror or e}') from e
		except UnicodeDecodeError as e:
			raise CatalogError(f'{path}: not valid utf-8: {e.reason}') from e

	def to_rows(self) -> list[list[str]]:
		"""Records in on-disk column order: symbol, iso, name, region."""
		return [[c.symbol, c.iso, c.name, c.region] for c in self._currencies]

	def labels(self) -> list[str]:
		return [c.label for c in self._currencies]

	@overload
	def __getitem__(self, index: int) -> Currency: ...

	@overload
	def __getitem__(self, index: slice) -> tuple[Currency, ...]: ...

	def __getitem__(self, index):
		return self._currencies[index]

	def __len__(self) -> int:
		return len(self._currencies)

	def __iter__(self) -> Iterator[Currency]:
		return iter(self._currencies)

	def __eq__(self, other: object) -> bool:
		if not isinstance(other, CurrencyCatalog):
			return NotImplemented
		return self._currencies == other._currencies

	def __hash__(self) -> int:
		return hash(self._currencies)

	def __repr__(self) -> str:
		return f'CurrencyCatalog({len(self._currencies)} currencies)'
