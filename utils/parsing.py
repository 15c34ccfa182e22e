from typing import Callable, Tuple, TypeVar

T = TypeVar("T")


def parse_pair(text: str, separator: str, kind: Callable[[str], T]) -> Tuple[T, T]:
    """
    Parse a pair like "800x600" or "-1.2,0.35".
    Raises ValueError if the separator is missing or a side does not parse.
    """
    token = text.strip()
    idx = token.find(separator)
    if idx <= 0 or idx == len(token) - 1:
        raise ValueError(f"Expected '<a>{separator}<b>', got {text!r}")
    left, right = token[:idx], token[idx + 1:]
    return kind(left.strip()), kind(right.strip())


def parse_complex(text: str) -> complex:
    """
    Parse "re,im" into a complex number.
    """
    re, im = parse_pair(text, ",", float)
    return complex(re, im)
