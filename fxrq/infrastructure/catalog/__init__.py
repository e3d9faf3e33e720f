from .reader import CurrencyCatalog

__all__ = ['CurrencyCatalog']
