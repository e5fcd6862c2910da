from core.constants import U64_MAX, U128_MAX
from core.errors import ArithmeticOverflowError


def ensure_u64(value: int, name: str = "value") -> int:
    """Reject anything that is not an integer in the u64 range."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, got {value!r}")
    if value < 0 or value > U64_MAX:
        raise ArithmeticOverflowError(f"{name} {value} is outside the u64 range")
    return value


def checked_mul_u128(a: int, b: int) -> int:
    result = a * b
    if result > U128_MAX:
        raise ArithmeticOverflowError(f"u128 overflow on {a} * {b}")
    return result


def checked_sub_u128(a: int, b: int) -> int:
    if b > a:
        raise ArithmeticOverflowError(f"u128 underflow on {a} - {b}")
    return a - b


def checked_sub_u64(a: int, b: int) -> int:
    if b > a:
        raise ArithmeticOverflowError(f"u64 underflow on {a} - {b}")
    return a - b


def checked_div(a: int, b: int) -> int:
    # floor division; operands are non-negative so this truncates toward zero
    if b == 0:
        raise ArithmeticOverflowError(f"division by zero on {a} / 0")
    return a // b


def to_u64(value: int) -> int:
    """Narrow a wide intermediate back to u64."""
    if value < 0 or value > U64_MAX:
        raise ArithmeticOverflowError(f"{value} does not fit in u64")
    return value
