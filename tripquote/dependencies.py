from tripquote.services.currency_service import CurrencyService, currency_service
from tripquote.services.quote_service import QuoteService, quote_service


def get_currency_service() -> CurrencyService:
    return currency_service


def get_quote_service() -> QuoteService:
    return quote_service
