# nosec B101


import json

import pytest

from fxrq.config.resolver import ConfigFile, find_config_file, load_config_file, resolve_config
from fxrq.domain.exceptions.currency import ConfigError
from fxrq.domain.models.config import DEFAULT_PROVIDER, Config

FILE_VALUES = {
	'base_currency': 'GBP',
	'target_currency': ['CHF', 'SEK'],
	'currency_code_file': 'file-currencies.csv',
	'proxy_url': 'http://file-proxy:3128',
	'endpoint': 'file-endpoint',
	'api_key': 'file-key',
}


def write_config(path, data):
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding='utf-8')
	return path


def test_no_config_file_anywhere_gives_defaults():
	assert find_config_file() is None

	config = resolve_config()

	assert config == Config()
	assert config.provider_name == DEFAULT_PROVIDER == 'exchangerate.host'
	assert config.targets == ()
	assert not config.is_one_shot


def test_search_prefers_working_directory(isolated_environment, home_dir):
	local = write_config(isolated_environment / '.fxrq.json', {'base_currency': 'EUR'})
	write_config(home_dir / '.fxrq.json', {'base_currency': 'USD'})

	assert find_config_file().resolve() == local.resolve()
	assert resolve_config().base_iso == 'EUR'


def test_search_falls_back_to_home(home_dir):
	write_config(home_dir / '.fxrq.json', {'base_currency': 'USD'})
	write_config(home_dir / '.config' / 'fxrq' / 'fxrq.json', {'base_currency': 'JPY'})

	assert resolve_config().base_iso == 'USD'


def test_search_uses_default_xdg_location(home_dir):
	write_config(home_dir / '.config' / 'fxrq' / 'fxrq.json', {'base_currency': 'JPY'})

	assert resolve_config().base_iso == 'JPY'


def test_search_honours_xdg_config_home(tmp_path, monkeypatch):
	xdg = tmp_path / 'xdg'
	write_config(xdg / 'fxrq' / 'fxrq.json', {'base_currency': 'NOK'})
	monkeypatch.setenv('XDG_CONFIG_HOME', str(xdg))

	assert resolve_config().base_iso == 'NOK'


def test_explicit_config_suppresses_search(isolated_environment, tmp_path):
	write_config(isolated_environment / '.fxrq.json', {'base_currency': 'EUR'})
	explicit = write_config(tmp_path / 'explicit.json', {'base_currency': 'CAD'})

	assert resolve_config(str(explicit)).base_iso == 'CAD'


def test_explicit_missing_config_is_an_error():
	with pytest.raises(ConfigError) as exc_info:
		resolve_config('/nonexistent.json')

	assert 'config' in str(exc_info.value)
	assert '/nonexistent.json' in str(exc_info.value)


def test_malformed_json_is_an_error(tmp_path):
	path = write_config(tmp_path / 'broken.json', '{"base_currency": "USD",')

	with pytest.raises(ConfigError) as exc_info:
		resolve_config(str(path))

	assert 'invalid config file' in str(exc_info.value)


def test_malformed_config_found_by_search_is_an_error(isolated_environment):
	write_config(isolated_environment / '.fxrq.json', 'not json at all')

	with pytest.raises(ConfigError):
		resolve_config()


def test_wrongly_typed_field_is_an_error(tmp_path):
	path = write_config(tmp_path / 'typed.json', {'target_currency': 'EUR'})

	with pytest.raises(ConfigError) as exc_info:
		resolve_config(str(path))

	assert 'target_currency' in str(exc_info.value)


def test_top_level_must_be_an_object(tmp_path):
	path = write_config(tmp_path / 'list.json', [1, 2, 3])

	with pytest.raises(ConfigError):
		load_config_file(path)


def test_unknown_keys_and_amount_are_ignored(tmp_path):
	path = write_config(tmp_path / 'extra.json', {'base_currency': 'USD', 'amount': '100', 'colour': 'blue'})

	config = resolve_config(str(path))

	assert config.base_iso == 'USD'
	assert config.amount == ''


def test_null_values_count_as_empty(tmp_path):
	path = write_config(tmp_path / 'nulls.json', {'base_currency': None, 'target_currency': None, 'endpoint': None})

	config = resolve_config(str(path))

	assert config.base_iso == ''
	assert config.targets == ()
	assert config.provider_name == DEFAULT_PROVIDER


def test_config_file_model_reads_every_key(tmp_path):
	path = write_config(tmp_path / 'full.json', FILE_VALUES)

	assert load_config_file(path) == ConfigFile(**FILE_VALUES)


@pytest.mark.parametrize(
	'flag, value, attr, expected',
	[
		('base', 'USD', 'base_iso', 'USD'),
		('target', 'EUR,JPY', 'targets', ('EUR', 'JPY')),
		('catalog_file', 'cli.json', 'catalog_file', 'cli.json'),
		('endpoint', 'exchangerate.host', 'provider_name', 'exchangerate.host'),
		('api_key', 'cli-key', 'api_key', 'cli-key'),
		('proxy_url', 'http://cli-proxy:8080', 'proxy_url', 'http://cli-proxy:8080'),
	],
)
def test_non_empty_flag_overrides_file_value(tmp_path, flag, value, attr, expected):
	path = write_config(tmp_path / 'fxrq.json', FILE_VALUES)

	config = resolve_config(str(path), **{flag: value})

	assert getattr(config, attr) == expected


def test_empty_flags_keep_file_values(tmp_path):
	path = write_config(tmp_path / 'fxrq.json', FILE_VALUES)

	config = resolve_config(
		str(path), base='', target='', catalog_file='', endpoint='', api_key='', proxy_url=''
	)

	assert config.base_iso == 'GBP'
	assert config.targets == ('CHF', 'SEK')
	assert config.catalog_file == 'file-currencies.csv'
	assert config.provider_name == 'file-endpoint'
	assert config.api_key == 'file-key'
	assert config.proxy_url == 'http://file-proxy:3128'


def test_target_flag_is_split_without_trimming():
	config = resolve_config(target='EUR, JPY,')

	assert config.targets == ('EUR', ' JPY', '')


def test_amount_and_strict_come_from_flags_only():
	config = resolve_config(base='USD', target='EUR', amount='12.50', strict=True)

	assert config.amount == '12.50'
	assert config.strict_errors is True
	assert config.is_one_shot
