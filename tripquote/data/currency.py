"""Currency reference data: static fallback rates, symbols and display formatting."""

from decimal import ROUND_HALF_UP, Decimal

# Static exchange rates to USD, consulted only when the live rate source fails
EXCHANGE_RATES_TO_USD: dict[str, Decimal] = {
    "USD": Decimal("1.0"),
    "GBP": Decimal("1.27"),
    "EUR": Decimal("1.08"),
    "CAD": Decimal("0.74"),
    "AUD": Decimal("0.65"),
    "NZD": Decimal("0.60"),
    "CHF": Decimal("1.12"),
    "JPY": Decimal("0.0067"),
    "CNY": Decimal("0.14"),
    "INR": Decimal("0.012"),
    "SGD": Decimal("0.75"),
    "HKD": Decimal("0.13"),
    "KRW": Decimal("0.00074"),
    "AED": Decimal("0.27"),
    "QAR": Decimal("0.27"),
    "BRL": Decimal("0.20"),
    "MXN": Decimal("0.058"),
    "SEK": Decimal("0.095"),
    "NOK": Decimal("0.093"),
    "DKK": Decimal("0.145"),
    "PLN": Decimal("0.25"),
    "CZK": Decimal("0.043"),
    "HUF": Decimal("0.0028"),
    "TRY": Decimal("0.031"),
}

CURRENCY_NAMES: dict[str, str] = {
    "GBP": "British Pound",
    "EUR": "Euro",
    "USD": "US Dollar",
    "CAD": "Canadian Dollar",
    "AUD": "Australian Dollar",
    "NZD": "New Zealand Dollar",
    "CHF": "Swiss Franc",
    "JPY": "Japanese Yen",
    "CNY": "Chinese Yuan",
    "INR": "Indian Rupee",
    "SGD": "Singapore Dollar",
    "HKD": "Hong Kong Dollar",
    "KRW": "South Korean Won",
    "AED": "UAE Dirham",
    "QAR": "Qatari Riyal",
    "BRL": "Brazilian Real",
    "MXN": "Mexican Peso",
    "SEK": "Swedish Krona",
    "NOK": "Norwegian Krone",
    "DKK": "Danish Krone",
    "PLN": "Polish Zloty",
    "CZK": "Czech Koruna",
    "HUF": "Hungarian Forint",
    "TRY": "Turkish Lira",
}

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$", "CAD": "C$", "GBP": "£", "EUR": "€",
    "JPY": "¥", "AUD": "A$", "NZD": "NZ$", "SGD": "S$", "HKD": "HK$",
    "INR": "₹", "CNY": "¥", "CHF": "CHF", "KRW": "₩",
    "AED": "AED", "QAR": "QAR", "TRY": "₺", "BRL": "R$", "MXN": "$",
    "SEK": "kr", "NOK": "kr", "DKK": "kr", "PLN": "zł", "CZK": "Kč",
    "HUF": "Ft",
}

ZERO_DECIMAL_CURRENCIES = {"JPY", "KRW", "HUF"}

CENTS = Decimal("0.01")


def round2(amount: Decimal) -> Decimal:
    """Round to 2 decimal places, half away from zero."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def fallback_rate(from_currency: str, to_currency: str) -> Decimal | None:
    """Cross rate from the static table, or None if either side is unknown."""
    from_usd = EXCHANGE_RATES_TO_USD.get(from_currency.upper())
    to_usd = EXCHANGE_RATES_TO_USD.get(to_currency.upper())
    if not from_usd or not to_usd:
        return None
    return from_usd / to_usd


def supported_currencies() -> list[dict]:
    return [
        {"code": code, "name": name, "symbol": CURRENCY_SYMBOLS.get(code, code)}
        for code, name in CURRENCY_NAMES.items()
    ]


def is_supported_currency(code: str) -> bool:
    return code.upper() in CURRENCY_NAMES


def format_price(amount: Decimal | float, currency: str = "GBP") -> str:
    """Format a price with currency symbol for display."""
    code = currency.upper()
    symbol = CURRENCY_SYMBOLS.get(code, code + " ")
    value = Decimal(str(amount))
    if code in ZERO_DECIMAL_CURRENCIES:
        whole = value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return f"{symbol}{whole:,}"
    return f"{symbol}{round2(value):,.2f}"
