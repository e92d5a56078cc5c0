"""
Renders binding values as TypeScript literal source text.
"""
import collections.abc
import json
import math
from typing import Any, Sequence as SequenceABC

from deno_babel.deno_datatypes import Scalar, Sequence, Record, to_value
from deno_babel.deno_names import camel_case


class Printer:
    """Formats Scalar/Sequence/Record values into single-line TypeScript literals."""

    def __init__(self):
        self._handlers = self._create_handlers()
        self._scalar_handlers = self._create_scalar_handlers()

    def pformat(self, obj) -> str:
        """Public entry point to format a value (variants or plain Python data)."""
        if not isinstance(obj, (Scalar, Sequence, Record)):
            obj = to_value(obj)
        return self._handlers[type(obj)](obj)

    def _create_handlers(self):
        return {
            Scalar: self._pformat_scalar,
            Sequence: self._pformat_sequence,
            Record: self._pformat_record,
        }

    def _create_scalar_handlers(self):
        return {
            str: self._pformat_str,
            int: self._pformat_int,
            float: self._pformat_float,
            bool: self._pformat_bool,
            type(None): self._pformat_none,
        }

    def _pformat_sequence(self, obj: Sequence) -> str:
        return "[" + ", ".join(self.pformat(item) for item in obj.items) + "]"

    def _pformat_record(self, obj: Record) -> str:
        if not obj.items:
            return "{}"
        fields = ", ".join(
            f"{camel_case(name)}: {self.pformat(item)}"
            for name, item in zip(obj.names, obj.items)
        )
        return "{ " + fields + " }"

    def _get_scalar_handler(self, value):
        # Walk the MRO so subclasses (str/int enums, bool before int) find their base handler.
        for klass in type(value).__mro__:
            handler = self._scalar_handlers.get(klass)
            if handler is not None:
                return handler
        return None

    def _pformat_scalar(self, obj: Scalar) -> str:
        value = obj.value
        handler = self._get_scalar_handler(value)
        if handler is None:
            if isinstance(value, collections.abc.Mapping):
                handler = self._pformat_mapping
            else:
                handler = self._pformat_primitive
        # Literals must stay on one line of the script file.
        return handler(value).replace("\n", "\\n")

    def _pformat_str(self, value):
        return json.dumps(str.__str__(value), ensure_ascii=False)

    def _pformat_int(self, value):
        return int.__repr__(value)

    def _pformat_primitive(self, value):
        return str(value)

    def _pformat_float(self, value):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return float.__repr__(value)

    def _pformat_bool(self, value):
        return 'true' if value else 'false'

    def _pformat_none(self, value):
        return 'null'

    def _pformat_mapping(self, value):
        try:
            return json.dumps(value, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            return str(value)


_printer = Printer()


def render(value: Any, field_names: SequenceABC[str] = (), as_record: bool = False) -> str:
    """
    Render `value` as a TypeScript literal.

    Lists render as arrays unless `as_record` is set, in which case elements
    are zipped with `field_names` into an object literal. Nested elements of
    an array are rendered as records whenever field names are present.
    """
    return _printer.pformat(to_value(value, field_names, as_record))


__all__ = ["Printer", "render"]
