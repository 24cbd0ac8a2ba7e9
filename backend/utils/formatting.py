from utils.jalali import to_persian_digits


def format_number(amount) -> str:
    """Thousands-separated number, dropping a zero fractional part."""
    if amount is None:
        return "0"
    amount = float(amount)
    if amount.is_integer():
        return f"{int(amount):,}"
    return f"{amount:,.2f}"


def format_toman(amount, persian_digits: bool = True) -> str:
    formatted = format_number(amount)
    if persian_digits:
        formatted = to_persian_digits(formatted).replace(",", "٬")
    return f"{formatted} تومان"
