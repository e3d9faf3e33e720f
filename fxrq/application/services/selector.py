import logging
from collections.abc import Callable

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import CompleteEvent, Completer, FuzzyCompleter, WordCompleter
from prompt_toolkit.key_binding import KeyBindings, merge_key_bindings
from prompt_toolkit.validation import Validator

from fxrq.domain.exceptions.currency import FinderCancelled
from fxrq.domain.models.currency import Currency
from fxrq.infrastructure.catalog import CurrencyCatalog

logger = logging.getLogger(__name__)

PromptFn = Callable[..., str]


def cancel_key_bindings() -> KeyBindings:
	bindings = KeyBindings()

	@bindings.add('escape', eager=True)
	def _(event):
		event.app.exit(exception=KeyboardInterrupt, style='class:aborting')

	return bindings


def accept_key_bindings(completer: Completer, is_known: Callable[[str], bool]) -> KeyBindings:
	"""Enter on a query that names no currency takes the best fuzzy match first."""
	bindings = KeyBindings()

	@bindings.add('enter')
	def _(event):
		buffer = event.current_buffer
		if buffer.text.strip() and not is_known(buffer.text):
			completions = completer.get_completions(buffer.document, CompleteEvent())
			top = next(iter(completions), None)
			if top is not None:
				buffer.apply_completion(top)
		buffer.validate_and_handle()

	return bindings


class CurrencySelector:
	"""
	Fuzzy finder over the currency catalog.

	Rows are shown as "{region} - {name} - {iso} ({symbol})". An answer is
	accepted when it is one of those labels or a bare ISO code from the
	catalog. Enter on any other query takes the top fuzzy match. Esc, Ctrl-C
	and Ctrl-D abort with FinderCancelled.
	"""

	def __init__(self, catalog: CurrencyCatalog, prompt: PromptFn | None = None):
		self.catalog = catalog
		self._by_label: dict[str, Currency] = {}
		self._by_iso: dict[str, Currency] = {}
		for currency in catalog:
			self._by_label.setdefault(currency.label, currency)
			self._by_iso.setdefault(currency.iso.upper(), currency)
		self._prompt = prompt or self._terminal_prompt
		self._session: PromptSession | None = None

	def pick_one(self) -> str:
		currency = self._ask('Base currency: ', allow_empty=False)
		return currency.iso

	def pick_many(self) -> list[str]:
		chosen: list[str] = []
		while True:
			if chosen:
				message = f'Target currency [{" ".join(chosen)}] (enter to finish): '
			else:
				message = 'Target currency: '
			currency = self._ask(message, allow_empty=bool(chosen))
			if currency is None:
				return chosen
			if currency.iso not in chosen:
				chosen.append(currency.iso)

	def resolve(self, text: str) -> Currency | None:
		text = text.strip()
		return self._by_label.get(text) or self._by_iso.get(text.upper())

	def _is_known(self, text: str) -> bool:
		return self.resolve(text) is not None

	def _ask(self, message: str, allow_empty: bool) -> Currency | None:
		validator = Validator.from_callable(
			lambda text: (allow_empty and not text.strip()) or self._is_known(text),
			error_message='Pick a currency from the list',
			move_cursor_to_end=True,
		)
		while True:
			try:
				text = self._prompt(message, validator=validator)
			except (KeyboardInterrupt, EOFError) as e:
				raise FinderCancelled('currency selection cancelled') from e

			if not text.strip():
				if allow_empty:
					return None
				continue

			currency = self.resolve(text)
			if currency is not None:
				return currency
			logger.warning(f'No currency matches {text!r}')

	def _terminal_prompt(self, message: str, validator: Validator) -> str:
		if self._session is None:
			completer = FuzzyCompleter(WordCompleter(self.catalog.labels(), sentence=True))
			self._session = PromptSession(
				completer=completer,
				complete_while_typing=True,
				key_bindings=merge_key_bindings([cancel_key_bindings(), accept_key_bindings(completer, self._is_known)]),
				reserve_space_for_menu=10,
			)
		session = self._session
		return session.prompt(
			message,
			validator=validator,
			validate_while_typing=False,
			pre_run=lambda: session.default_buffer.start_completion(select_first=False),
		)
