import logging
import os
import signal
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from decimal import Decimal
from typing import TextIO

try:
	import termios
except ImportError:  # not available on Windows
	termios = None

from fxrq.application.services.selector import CurrencySelector
from fxrq.domain.exceptions.currency import FxrqError, InputError, ProviderError
from fxrq.domain.models.config import Config
from fxrq.domain.models.currency import Quote
from fxrq.infrastructure.providers import RateProvider

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_PROVIDER_ERROR = 3

SEPARATOR = '-------------------------'
SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ShutdownRequested(Exception):
	def __init__(self, signum: int):
		super().__init__(signal.Signals(signum).name)
		self.signum = signum


def render_rate(value: Decimal | int) -> str:
	if isinstance(value, Decimal):
		return format(value, 'f')
	return str(value)


def format_quote(quote: Quote) -> str:
	targets = ' '.join(quote.target_isos)
	rates = ' '.join(f'{iso}:{render_rate(quote.rates[iso])}' for iso in sorted(quote.rates))
	return '\n'.join(
		[
			f'Date:  {quote.date}',
			f'Base:  {quote.base_iso}',
			f'Target:  [{targets}]',
			f'Rates:  map[{rates}]',
		]
	)


@contextmanager
def preserved_terminal(stream: TextIO) -> Iterator[None]:
	"""Put the tty attributes of stream back on exit; a no-op when it is not a terminal."""
	try:
		fd = stream.fileno()
	except (AttributeError, OSError, ValueError):
		fd = None

	if termios is None or fd is None or not os.isatty(fd):
		yield
		return

	saved = termios.tcgetattr(fd)
	try:
		yield
	finally:
		termios.tcsetattr(fd, termios.TCSADRAIN, saved)


class SessionController:
	"""
	Drives one run of fxrq.

	With base, targets and amount all configured a single quote is printed
	(one-shot). Otherwise the prompt loop runs in a daemon thread while the
	calling (main) thread waits for SIGINT/SIGTERM. The loop itself never
	checks for shutdown; the process simply exits once the signal is seen.
	"""

	def __init__(
		self,
		config: Config,
		provider: RateProvider,
		selector: CurrencySelector,
		stdin: TextIO | None = None,
		stdout: TextIO | None = None,
	):
		self.config = config
		self.provider = provider
		self.selector = selector
		self.stdin = stdin or sys.stdin
		self.stdout = stdout or sys.stdout
		self._stopped = threading.Event()
		self._exit_code = EXIT_OK

	def run(self) -> int:
		if self.config.is_one_shot:
			return self.run_once()
		return self.run_interactive()

	def run_once(self) -> int:
		try:
			quote = self.provider.quote(self.config.base_iso, self.config.targets, self.config.amount)
		except ProviderError as e:
			logger.error(f'Quote failed: {e}')
			return EXIT_PROVIDER_ERROR

		self.print_quote(quote)
		return EXIT_OK

	def run_interactive(self) -> int:
		previous = {signum: signal.signal(signum, self._handle_signal) for signum in SHUTDOWN_SIGNALS}
		worker = threading.Thread(target=self._interactive, name='fxrq-interactive', daemon=True)
		try:
			# the finder may still own the tty when a signal ends the wait
			with preserved_terminal(self.stdin):
				worker.start()
				self._stopped.wait()
		except ShutdownRequested as e:
			logger.info(f'Received {e}, shutting down')
			return EXIT_OK
		finally:
			for signum, handler in previous.items():
				signal.signal(signum, handler)

		return self._exit_code

	def _handle_signal(self, signum, frame):
		raise ShutdownRequested(signum)

	def _interactive(self) -> None:
		try:
			base = self.config.base_iso or self.selector.pick_one()
			targets = list(self.config.targets) or self.selector.pick_many()
			self._write(f'{self.config.provider_name}\n')
			self.prompt_loop(base, targets)
		except FxrqError as e:
			logger.error(str(e))
			self._exit_code = EXIT_FAILURE
		except Exception:
			logger.exception('Interactive session crashed')
			self._exit_code = EXIT_FAILURE
		finally:
			self._stopped.set()

	def prompt_loop(self, base: str, targets: list[str]) -> None:
		"""Read amounts until stdin is exhausted; base and targets never change."""
		while True:
			self._write(f'{SEPARATOR}\n')
			self._write('Enter amount: ')
			try:
				amount = self.read_amount()
			except InputError as e:
				logger.warning(str(e))
				continue
			except EOFError:
				logger.info('End of input, leaving interactive mode')
				return

			try:
				quote = self.provider.quote(base, targets, amount)
			except ProviderError as e:
				logger.error(f'Quote failed: {e}')
				continue
			self.print_quote(quote)

	def read_amount(self) -> str:
		line = self.stdin.readline()
		if not line:
			raise EOFError
		tokens = line.split()
		if not tokens:
			raise InputError('expected an amount, got an empty line')
		return tokens[0]

	def print_quote(self, quote: Quote) -> None:
		self._write(f'{format_quote(quote)}\n')

	def _write(self, text: str) -> None:
		self.stdout.write(text)
		self.stdout.flush()
