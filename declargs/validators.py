"""
Declargs validators.

A validator maps a candidate value (plus the extra arguments registered with it)
to None when the value is acceptable, or to a short rejection message otherwise.
Rejection messages are reported followed by the descriptor's display name, e.g.
"Positive value expected for --width". An empty message is a rejection reported
with the generic "Missing or invalid value for" template.

Stock validators
- positive(value): a strictly positive integer.
- unsigned(value): digits only.
- integer(value): any base-10 integer.
- oneof(value, *choices): one of the given literals.
- matches(value, pattern): the whole value matches a regular expression.
"""
import re


def validate(descriptor, value, /):
    """
    Run the descriptor's validator on a value.

    Returns
    - None when the value is accepted, there is no validator, or the value is empty
      (absent optional values are never validated).
    - The rejection message otherwise (possibly "").

    Raises
    - TypeError: when the validator returns something other than a string or None.
    """
    if descriptor.validator is None or not value:
        return None
    message = descriptor.validator(value, *descriptor.arguments)
    if message is not None and not isinstance(message, str):
        raise TypeError(f"validator {descriptor.validator!r} must return a string or None")
    return message


def _decimal(value, /):
    # ASCII digits with an optional sign; no underscores, no surrounding spaces
    if re.fullmatch(r"[+-]?[0-9]+", value, re.ASCII) is None:
        return None
    return int(value, 10)


def positive(value, /):
    number = _decimal(value)
    return None if number is not None and number > 0 else "Positive value expected for"


def unsigned(value, /):
    if not value:
        return "Missing number"
    return None if value.isascii() and value.isdigit() else "Not a positive integer"


def integer(value, /):
    return None if _decimal(value) is not None else "Not an integer"


def oneof(value, /, *choices):
    if value in choices:
        return None
    return "Expected %s for" % "|".join(choices)


def matches(value, pattern, /):
    if re.fullmatch(pattern, value):
        return None
    return "Malformed value for"


__all__ = (
    "validate",
    "positive",
    "unsigned",
    "integer",
    "oneof",
    "matches",
)
