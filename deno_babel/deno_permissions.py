from typing import Any, Iterable, List


def format_permission(entry: Any) -> str:
    """
    Turn one permission entry into a Deno flag.

    'net'               -> '--allow-net'
    ('read', ['/tmp'])  -> '--allow-read=/tmp'
    Capability names are not validated; Deno rejects unknown ones itself.
    """
    match entry:
        case str():
            return f"--allow-{entry}"
        case (name, values) if isinstance(values, (list, tuple)):
            return f"--allow-{name}=" + ",".join(str(v) for v in values)
        case (name, value):
            return f"--allow-{name}={value}"
        case (name,):
            return f"--allow-{name}"
        case _:
            return f"--allow-{entry}"


def permission_flags(spec: Iterable[Any] | None) -> List[str]:
    if spec is None:
        return []
    if isinstance(spec, str):
        spec = [spec]
    return [format_permission(entry) for entry in spec]


def format_permissions(spec: Iterable[Any] | None) -> str:
    return " ".join(permission_flags(spec))


__all__ = ["format_permission", "format_permissions", "permission_flags"]
