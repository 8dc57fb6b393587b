from __future__ import annotations


def format_amount(value: float) -> str:
    """Render a number the way it appears in insight text: 500 -> "500", 49.5 -> "49.5"."""
    value = round(float(value), 2)
    if value == int(value):
        return str(int(value))
    return repr(value)
