from .resolver import ConfigFile, find_config_file, load_config_file, resolve_config
from .settings import Settings, get_settings

__all__ = [
	'ConfigFile',
	'Settings',
	'find_config_file',
	'get_settings',
	'load_config_file',
	'resolve_config',
]
