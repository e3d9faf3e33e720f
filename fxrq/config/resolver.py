import logging
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from fxrq.domain.exceptions.currency import ConfigError
from fxrq.domain.models.config import DEFAULT_PROVIDER, Config

logger = logging.getLogger(__name__)


class ConfigFile(BaseModel):
	"""Shape of a .fxrq.json file. Amount is deliberately absent."""

	base_currency: str | None = None
	target_currency: list[str] | None = None
	currency_code_file: str | None = None
	proxy_url: str | None = None
	endpoint: str | None = None
	api_key: str | None = None

	model_config = ConfigDict(extra='ignore')


def search_paths() -> list[Path]:
	home = Path(os.path.expanduser('~'))
	xdg_config_home = os.environ.get('XDG_CONFIG_HOME') or str(home / '.config')
	return [
		Path('.fxrq.json'),
		home / '.fxrq.json',
		Path(xdg_config_home) / 'fxrq' / 'fxrq.json',
	]


def find_config_file() -> Path | None:
	for path in search_paths():
		candidate = path.expanduser().absolute()
		if candidate.is_file():
			return candidate
	return None


def load_config_file(path: str | Path) -> ConfigFile:
	try:
		raw = Path(path).read_text(encoding='utf-8')
	except OSError as e:
		raise ConfigError(f'cannot read config file {path}: {e.strerror or e}') from e

	try:
		return ConfigFile.model_validate_json(raw)
	except ValidationError as e:
		first = e.errors()[0]
		location = '.'.join(str(part) for part in first['loc'])
		detail = f"{location}: {first['msg']}" if location else first['msg']
		raise ConfigError(f'invalid config file {path}: {detail}') from e


def resolve_config(
	config_path: str = '',
	*,
	base: str = '',
	target: str = '',
	amount: str = '',
	catalog_file: str = '',
	endpoint: str = '',
	api_key: str = '',
	proxy_url: str = '',
	strict: bool = False,
) -> Config:
	"""
	Layer defaults, the config file and command-line values into a Config.

	An explicit config_path must be readable. Without one the search path is
	tried and a missing file simply means no file layer.
	"""
	path = Path(config_path) if config_path else find_config_file()
	if path is None:
		logger.debug('No config file found, using defaults and flags only')
		file_config = ConfigFile()
	else:
		file_config = load_config_file(path)
		logger.info(f'Loaded config file {path}')

	if target:
		targets = tuple(target.split(','))
	else:
		targets = tuple(file_config.target_currency or ())

	return Config(
		base_iso=base or file_config.base_currency or '',
		targets=targets,
		amount=amount,
		catalog_file=catalog_file or file_config.currency_code_file or '',
		provider_name=endpoint or file_config.endpoint or DEFAULT_PROVIDER,
		api_key=api_key or file_config.api_key or '',
		proxy_url=proxy_url or file_config.proxy_url or '',
		strict_errors=strict,
	)
