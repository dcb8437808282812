"""
Declargs default resolution.

Order of resolution for a default clause "($VAR,literal)":
1. the environment variable VAR, when it is set to a non-empty value;
2. the literal text of the clause;
3. the empty string.
"""
import os

from .validators import validate


def resolve(clause, /, environ=None):
    """
    Resolve a DefaultClause (or None) to a concrete string.

    - environ: mapping used for $VAR lookups (defaults to os.environ).
    """
    if clause is None:
        return ""
    if environ is None:
        environ = os.environ
    if clause.variable and (value := environ.get(clause.variable)):
        return value
    return clause.literal or ""


def check(descriptor, /):
    """
    Validate the resolved default of a descriptor.

    Returns
    - None when the default is usable.
    - A rejection message otherwise ("" for a missing mandatory default, which
      is reported with the generic template).
    """
    if descriptor.definition.clause is None:
        return None
    if not descriptor.default:
        return "" if descriptor.mandatory else None
    return validate(descriptor, descriptor.default)


__all__ = (
    "resolve",
    "check",
)
