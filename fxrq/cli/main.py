import argparse
import logging
import os
import sys
from contextlib import closing

from pydantic import ValidationError

from fxrq import __version__
from fxrq.application.services import CurrencySelector, SessionController
from fxrq.application.services.session import EXIT_FAILURE
from fxrq.config import get_settings, resolve_config
from fxrq.domain.exceptions.currency import FxrqError
from fxrq.infrastructure.catalog import CurrencyCatalog
from fxrq.infrastructure.providers import create_provider
from fxrq.monitoring.logger import setup_logging

logger = logging.getLogger('fxrq')

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(
		prog='fxrq',
		description='Quote foreign-exchange conversions from the terminal.',
		allow_abbrev=False,
	)
	parser.add_argument('-config', '--config', default='', help='path to config file')
	parser.add_argument('-base', '--base', default='', help='base currency')
	parser.add_argument(
		'-target',
		'--target',
		default='',
		help='target currency, use commas to separate multiple currencies',
	)
	parser.add_argument('-amount', '--amount', default='', help='amount of base currency')
	parser.add_argument('-curcodefile', '--curcodefile', default='', help='currency code file (.csv or .json)')
	parser.add_argument('-endpoint', '--endpoint', default='', help='API endpoint (default: exchangerate.host)')
	parser.add_argument('-apikey', '--apikey', default='', help='API key')
	parser.add_argument('-proxyurl', '--proxyurl', default='', help='proxy url')
	parser.add_argument(
		'-strict',
		'--strict',
		action='store_true',
		help='fail on provider errors instead of printing an empty quote',
	)
	parser.add_argument(
		'-loglevel',
		'--loglevel',
		type=str.upper,
		choices=LOG_LEVELS,
		default=None,
		help='console log level (default: FXRQ_LOG_LEVEL or WARNING)',
	)
	parser.add_argument('-version', '--version', action='version', version=f'%(prog)s {__version__}')
	return parser


def main(argv: list[str] | None = None) -> int:
	args = build_parser().parse_args(argv)

	try:
		settings = get_settings()
	except ValidationError as e:
		print(f'fxrq: invalid FXRQ_* environment settings: {e}', file=sys.stderr)
		return EXIT_FAILURE

	setup_logging(args.loglevel or settings.LOG_LEVEL, settings.LOG_FILE)

	try:
		config = resolve_config(
			args.config,
			base=args.base,
			target=args.target,
			amount=args.amount,
			catalog_file=args.curcodefile,
			endpoint=args.endpoint,
			api_key=args.apikey,
			proxy_url=args.proxyurl,
			strict=args.strict or settings.STRICT_PROVIDER_ERRORS,
		)
		catalog = CurrencyCatalog.load(config.catalog_file)
		provider = create_provider(config, timeout=settings.HTTP_TIMEOUT)
	except FxrqError as e:
		logger.error(str(e))
		return EXIT_FAILURE

	with closing(provider):
		controller = SessionController(config, provider, CurrencySelector(catalog))
		return controller.run()


def run() -> None:
	code = main()
	sys.stdout.flush()
	sys.stderr.flush()
	logging.shutdown()
	# the interactive reader thread may still be blocked on stdin
	os._exit(code)
