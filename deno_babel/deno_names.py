import re

_CAMEL_BOUNDARY = re.compile(r'([a-z])([A-Z])')
_WORD_SEPARATOR = re.compile(r'[^A-Za-z0-9]+')


def camel_case(name: str) -> str:
    """Normalize an identifier-like string to lowerCamelCase ('foo_bar' -> 'fooBar')."""
    spaced = _CAMEL_BOUNDARY.sub(r'\1 \2', str(name))
    words = [w for w in _WORD_SEPARATOR.split(spaced) if w]
    if not words:
        return ""
    head, *tail = words
    return head.lower() + "".join(w[0].upper() + w[1:] for w in tail)


__all__ = ["camel_case"]
