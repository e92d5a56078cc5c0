"""
Defines the core data types for the deno_babel pipeline.

A binding's value is turned into one of three variants (Scalar, Sequence,
Record) exactly once, when the binding is built. The printer then renders
the variant without looking at the shape of the underlying Python value.
"""

from dataclasses import dataclass, field
from typing import Any, List, Sequence as SequenceABC, Tuple, Union


class DenoBabelError(Exception):
    """Base class for errors raised by deno_babel."""


class ConfigError(DenoBabelError):
    """Raised when configuration values or files are invalid."""


class SessionNotSupported(DenoBabelError):
    def __init__(self, session: Any = None):
        super().__init__("Sessions are not supported for Deno code blocks")
        self.session = session


# =================================================================
# Value variants
# =================================================================

@dataclass(frozen=True)
class Scalar:
    value: Any


@dataclass(frozen=True)
class Sequence:
    items: Tuple["Value", ...] = ()


@dataclass(frozen=True)
class Record:
    """Positional zip of field names and values; not a mapping."""
    names: Tuple[str, ...] = ()
    items: Tuple["Value", ...] = ()


Value = Union[Scalar, Sequence, Record]


@dataclass(frozen=True)
class Binding:
    name: str
    value: Value


def _is_sequence(obj: Any) -> bool:
    return isinstance(obj, (list, tuple))


def to_value(raw: Any, field_names: SequenceABC[str] = (), as_record: bool = False) -> Value:
    """
    Build the variant for `raw`.

    A list/tuple becomes a Record when `as_record` is set (elements zipped
    with `field_names` by position), otherwise a Sequence whose elements are
    built with `as_record` switched on whenever field names were given.
    Everything else is a Scalar.
    """
    if isinstance(raw, (Scalar, Sequence, Record)):
        return raw
    if not _is_sequence(raw):
        return Scalar(raw)
    names = list(field_names or ())
    if as_record:
        pairs = list(zip(names, raw))
        return Record(
            names=tuple(name for name, _ in pairs),
            items=tuple(to_value(item) for _, item in pairs),
        )
    return Sequence(tuple(to_value(item, names, bool(names)) for item in raw))


def binding_value(raw: Any, field_names: SequenceABC[str] = ()) -> Value:
    """
    Decide the top-level shape of a binding.

    With field names, a flat sequence is a single record and a sequence of
    sequences (a table) is a sequence of record rows.
    """
    names = list(field_names or ())
    if not names or not _is_sequence(raw):
        return to_value(raw)
    is_table = any(_is_sequence(item) for item in raw)
    return to_value(raw, names, as_record=not is_table)


def make_binding(name: str, raw: Any, field_names: SequenceABC[str] = ()) -> Binding:
    return Binding(name=str(name), value=binding_value(raw, field_names))


@dataclass
class ExecutionParams:
    """Normalized view of a code block's parameter bag."""
    cmd: str
    result_type: str = "value"
    bindings: List[Binding] = field(default_factory=list)
    allow: List[Any] = field(default_factory=list)
    result_params: List[str] = field(default_factory=list)
    prefix: str = "let"

    @property
    def wrap_value(self) -> bool:
        return self.result_type == "value"
