from .selector import CurrencySelector
from .session import SessionController, format_quote

__all__ = ['CurrencySelector', 'SessionController', 'format_quote']
