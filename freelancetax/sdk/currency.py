"""EUR/BGN conversion for display and entry.

The ledger and every computed amount are in EUR. BGN is a view: convert on
the way out for display, and on the way in when an amount is typed in BGN.
"""

EXCHANGE_RATE = 1.95583  # BGN per EUR, fixed

STORAGE_CURRENCY = "EUR"
SUPPORTED_CURRENCIES = ("EUR", "BGN")


def to_bgn(eur: float) -> float:
    return eur * EXCHANGE_RATE


def to_eur(bgn: float) -> float:
    return bgn / EXCHANGE_RATE


def _check_currency(currency: str) -> str:
    code = currency.upper()
    if code not in SUPPORTED_CURRENCIES:
        raise ValueError(f"Unsupported currency '{currency}'. Expected one of {SUPPORTED_CURRENCIES}.")
    return code


def convert_for_display(amount_eur: float, currency: str = STORAGE_CURRENCY) -> float:
    """Convert a stored EUR amount to the display currency."""
    if _check_currency(currency) == "BGN":
        return to_bgn(amount_eur)
    return amount_eur


def convert_for_storage(amount: float, currency: str = STORAGE_CURRENCY) -> float:
    """Convert an amount entered in `currency` to EUR."""
    if _check_currency(currency) == "BGN":
        return to_eur(amount)
    return amount


def format_currency(amount: float, currency: str = STORAGE_CURRENCY) -> str:
    """Format an amount already in `currency`, e.g. "1,234.56 EUR"."""
    return f"{amount:,.2f} {_check_currency(currency)}"


def display(amount_eur: float, currency: str = STORAGE_CURRENCY) -> str:
    """Convert a stored EUR amount and format it for the display currency."""
    return format_currency(convert_for_display(amount_eur, currency), currency)
