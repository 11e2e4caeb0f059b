import re

ADDRESS_PATTERN = re.compile(r"0x[0-9a-fA-F]{40}")

SECONDS_PER_HOUR = 3600


def is_valid_address(value: str) -> bool:
    if not isinstance(value, str):
        return False

    return ADDRESS_PATTERN.fullmatch(value) is not None


def hours_until(period_finish: int, now: int) -> float:
    # Negative when the stream has already ended
    seconds_left = int(period_finish) - int(now)

    return seconds_left / SECONDS_PER_HOUR


def hours_to_str(hours: float) -> str:
    return f"{hours:.2f}"


def str_to_positive_int(value: str) -> int:
    try:
        # Try to convert value to an integer
        number = int(value)

        # Check that number is at least 1
        if number < 1:
            return -1

        return number

    except ValueError:
        return -1
