from dataclasses import dataclass

DEFAULT_PROVIDER = 'exchangerate.host'


@dataclass(frozen=True)
class Config:
	"""Effective run configuration. Empty strings and tuples mean "not set"."""

	base_iso: str = ''
	targets: tuple[str, ...] = ()
	amount: str = ''
	catalog_file: str = ''
	provider_name: str = DEFAULT_PROVIDER
	api_key: str = ''
	proxy_url: str = ''
	strict_errors: bool = False

	@property
	def is_one_shot(self) -> bool:
		return bool(self.base_iso and self.targets and self.amount)
