# ecr_secret_operator/ksecret/durations.py

"""
Go-style duration strings.

The validity annotation and the operator-wide maximum age are written the way
the Kubernetes ecosystem writes durations ("12h0m0s", "90m", "1.5h"). These
helpers convert between that notation and ``timedelta``.
"""

from datetime import timedelta
from decimal import Decimal, InvalidOperation
import re

_UNIT_MICROSECONDS = {
    "ns": Decimal("0.001"),
    "us": Decimal(1),
    "µs": Decimal(1),
    "μs": Decimal(1),
    "ms": Decimal(1000),
    "s": Decimal(1_000_000),
    "m": Decimal(60_000_000),
    "h": Decimal(3_600_000_000),
}

_COMPONENT = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(value: str) -> timedelta:
    """
    Parse a duration such as "300ms", "-1.5h" or "2h45m".

    Raises:
        ValueError: If the string is not a valid duration.
    """
    if not isinstance(value, str) or not value:
        raise ValueError(f"Invalid duration {value!r}")

    text = value
    negative = False
    if text[0] in "+-":
        negative = text[0] == "-"
        text = text[1:]

    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f"Invalid duration {value!r}")

    total = Decimal(0)
    position = 0
    while position < len(text):
        match = _COMPONENT.match(text, position)
        if match is None:
            raise ValueError(f"Invalid duration {value!r}")
        try:
            total += Decimal(match.group(1)) * _UNIT_MICROSECONDS[match.group(2)]
        except InvalidOperation as e:
            raise ValueError(f"Invalid duration {value!r}") from e
        position = match.end()

    micros = int(total)
    return timedelta(microseconds=-micros if negative else micros)


def format_duration(value: timedelta) -> str:
    """
    Render a duration the way Go's ``time.Duration.String`` does.

    Sub-second remainders are written as fractional seconds; durations under
    one second use the smallest fitting unit.
    """
    micros = (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
    if micros == 0:
        return "0s"

    sign = "-" if micros < 0 else ""
    micros = abs(micros)

    if micros < 1_000_000:
        if micros < 1000:
            return f"{sign}{micros}µs"
        return f"{sign}{_trim(Decimal(micros) / 1000)}ms"

    hours, micros = divmod(micros, 3_600_000_000)
    minutes, micros = divmod(micros, 60_000_000)
    seconds = _trim(Decimal(micros) / 1_000_000)

    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{sign}{minutes}m{seconds}s"
    return f"{sign}{seconds}s"


def round_duration(value: timedelta, multiple: timedelta) -> timedelta:
    """Round to the nearest multiple, halfway values rounding away from zero."""
    step = multiple // timedelta(microseconds=1)
    if step <= 0:
        return value

    micros = value // timedelta(microseconds=1)
    magnitude = abs(micros)
    quotient, remainder = divmod(magnitude, step)
    if remainder * 2 >= step:
        quotient += 1
    rounded = quotient * step
    return timedelta(microseconds=-rounded if micros < 0 else rounded)


def _trim(value: Decimal) -> str:
    text = format(value.normalize(), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
