"""Small text helpers exposed to templates."""

from datetime import UTC, datetime


def title(text: str) -> str:
    """Upper-case the first character, leave the rest alone."""
    return text[:1].upper() + text[1:]


def date(fmt: str) -> str:
    """Current UTC time formatted with strftime-style fmt."""
    return datetime.now(tz=UTC).strftime(fmt)


def strip_namespace(name: str) -> str:
    """Drop qualifying scopes from name, ignoring `::` inside template brackets.

    >>> strip_namespace("ns::Foo<std::string>")
    'Foo<std::string>'
    """
    depth = 0
    start = 0
    i = 0
    while i < len(name):
        char = name[i]
        if char == "<":
            depth += 1
        elif char == ">":
            depth = max(depth - 1, 0)
        elif depth == 0 and name.startswith("::", i):
            start = i + 2
            i += 1
        i += 1
    return name[start:]
