import math


def safe_float(value, default=0.0):
    if value is None or isinstance(value, bool):
        return default
    try:
        if isinstance(value, (list, tuple)):
            value = value[0] if value else default
        str_value = str(value).replace("$", "").replace(",", "").replace("%", "").strip()
        result = float(str_value) if str_value else default
    except (ValueError, TypeError):
        return default
    if math.isnan(result) or math.isinf(result):
        return default
    return result

def safe_int(value, default=0):
    number = safe_float(value, None)
    if number is None:
        return default
    return int(number)

def non_negative(value, default=0.0):
    """Parse a numeric field; absent, unparseable or negative values become 0."""
    number = safe_float(value, default)
    return number if number > 0 else 0.0

def safe_divide(numerator, denominator):
    """numerator / denominator, or 0 when the denominator is not positive."""
    return numerator / denominator if denominator > 0 else 0.0

def is_checked(value):
    """Interpret a host checkbox value (HTML forms send "on")."""
    if isinstance(value, str):
        return value.strip().lower() in ("on", "true", "yes", "1")
    return bool(value)
