# travelbill/domain/services/amount_words.py
"""
Spell out whole rupee amounts in English (international scale).

    11800 -> "eleven thousand eight hundred"

No "and", hyphens or commas, matching what is printed on the invoice.
"""

from __future__ import annotations

_ONES = [
    "zero", "one", "two", "three", "four", "five", "six", "seven", "eight", "nine",
    "ten", "eleven", "twelve", "thirteen", "fourteen", "fifteen", "sixteen",
    "seventeen", "eighteen", "nineteen",
]
_TENS = ["", "", "twenty", "thirty", "forty", "fifty", "sixty", "seventy", "eighty", "ninety"]
_SCALES = [
    (10 ** 15, "quadrillion"),
    (10 ** 12, "trillion"),
    (10 ** 9, "billion"),
    (10 ** 6, "million"),
    (10 ** 3, "thousand"),
]


def _below_thousand(n: int) -> list[str]:
    words: list[str] = []
    hundreds, rest = divmod(n, 100)
    if hundreds:
        words += [_ONES[hundreds], "hundred"]
    if rest >= 20:
        tens, ones = divmod(rest, 10)
        words.append(_TENS[tens])
        if ones:
            words.append(_ONES[ones])
    elif rest:
        words.append(_ONES[rest])
    return words


def to_words(n: int) -> str:
    if isinstance(n, bool) or not isinstance(n, int):
        raise TypeError(f"to_words expects an int, got {type(n).__name__}")
    if n < 0:
        return "minus " + to_words(-n)
    if n == 0:
        return _ONES[0]

    words: list[str] = []
    for scale, name in _SCALES:
        if n >= scale:
            count, n = divmod(n, scale)
            words += _below_thousand(count) if count < 1000 else to_words(count).split()
            words.append(name)
    words += _below_thousand(n)
    return " ".join(words)


def amount_in_words(n: int) -> str:
    """Invoice form: upper-case with the statutory ``ONLY`` suffix."""
    return f"{to_words(n).upper()} ONLY"
