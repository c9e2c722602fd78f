"""Helpers for the camelCase row format shared with the store and exporters."""


def camel_case(name: str) -> str:
    """Convert a snake_case field name to its camelCase row name."""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def lookup(raw: dict[str, object], name: str) -> object | None:
    """Read a field from a raw mapping by snake_case or camelCase name."""
    if name in raw:
        return raw[name]
    return raw.get(camel_case(name))
