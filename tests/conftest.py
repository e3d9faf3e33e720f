"""
Shared fixtures: every test runs in an empty working directory with a fake
HOME, no FXRQ_* environment and a fresh settings cache.
"""

import logging
import os
import signal
import threading
from logging.handlers import RotatingFileHandler

import pytest

from fxrq.config.settings import get_settings
from fxrq.domain.models.currency import Currency, Quote
from fxrq.infrastructure.catalog import CurrencyCatalog


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
	home = tmp_path / 'home'
	workdir = tmp_path / 'work'
	home.mkdir()
	workdir.mkdir()

	for key in list(os.environ):
		if key.startswith('FXRQ_'):
			monkeypatch.delenv(key)
	monkeypatch.delenv('XDG_CONFIG_HOME', raising=False)
	monkeypatch.setenv('HOME', str(home))
	monkeypatch.chdir(workdir)

	get_settings.cache_clear()
	yield workdir
	get_settings.cache_clear()


@pytest.fixture(autouse=True)
def restore_root_logger():
	"""Drop the handlers setup_logging installs; pytest manages its own."""
	root = logging.getLogger()
	level = root.level
	yield
	for handler in list(root.handlers):
		if type(handler) in (logging.StreamHandler, RotatingFileHandler):
			root.removeHandler(handler)
			handler.close()
	root.setLevel(level)


@pytest.fixture
def home_dir(isolated_environment):
	return isolated_environment.parent / 'home'


@pytest.fixture
def small_catalog():
	return CurrencyCatalog(
		[
			Currency(symbol='€', iso='EUR', region='Europe', name='Euro'),
			Currency(symbol='$', iso='USD', region='United States', name='US Dollar'),
			Currency(symbol='¥', iso='JPY', region='Japan', name='Yen'),
		]
	)


class FakeProvider:
	"""Records every quote request and answers with canned rates."""

	def __init__(self, rates=None, error=None, date='2024-01-02'):
		self.rates = rates or {}
		self.error = error
		self.date = date
		self.calls = []
		self.closed = False

	@property
	def name(self):
		return 'fake'

	def quote(self, base, targets, amount):
		self.calls.append((base, list(targets), amount))
		if self.error is not None:
			raise self.error
		return Quote(date=self.date, base_iso=base, target_isos=tuple(targets), rates=dict(self.rates))

	def close(self):
		self.closed = True


@pytest.fixture
def fake_provider():
	return FakeProvider()


class SignallingStdin:
	"""
	Serves the given lines, then sends signum to the main thread and blocks
	until released, the way a terminal waits for the next amount.
	"""

	def __init__(self, lines, signum=signal.SIGINT):
		self._lines = list(lines)
		self._signum = signum
		self._release = threading.Event()

	def readline(self):
		if self._lines:
			return self._lines.pop(0)
		signal.pthread_kill(threading.main_thread().ident, self._signum)
		self._release.wait(5)
		return ''

	def release(self):
		self._release.set()
