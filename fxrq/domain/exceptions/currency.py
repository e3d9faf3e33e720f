class FxrqError(Exception):
	pass


class ConfigError(FxrqError):
	pass


class CatalogError(FxrqError):
	pass


class UnsupportedFormat(CatalogError):
	pass


class FinderCancelled(FxrqError):
	pass


class InputError(FxrqError):
	pass


class ProviderError(FxrqError):
	pass


class NetworkError(ProviderError):
	pass


class DecodeError(ProviderError):
	pass
