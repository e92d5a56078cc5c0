"""
Composes imports, variable declarations and a body into one Deno script.
"""
from typing import Iterable, List

import pystache

from deno_babel.deno_datatypes import Binding
from deno_babel.deno_printer import Printer
from deno_babel.deno_splitter import sole_expression

SCRIPT_TEMPLATE = "{{{imports}}}\n\n{{{declarations}}}\n{{{body}}}"

# Prints exactly one value: the body's result, formatted by Deno.inspect.
EXPRESSION_WRAPPER = (
    "Deno.stdout.write(new TextEncoder().encode(Deno.inspect(await (async () => (\n"
    "{{{body}}}\n"
    "))())));"
)
BLOCK_WRAPPER = (
    "Deno.stdout.write(new TextEncoder().encode(Deno.inspect(await (async () => {\n"
    "{{{body}}}\n"
    "})())));"
)

_renderer = pystache.Renderer(escape=lambda u: u)
_printer = Printer()


def declare(name: str, literal: str, prefix: str = "let") -> str:
    return f"{prefix} {name} = {literal};"


def variable_assignments(bindings: Iterable[Binding], prefix: str = "let") -> List[str]:
    """One declaration statement per binding, in binding order."""
    return [declare(b.name, _printer.pformat(b.value), prefix) for b in bindings]


def wrap(body: str) -> str:
    """
    Place `body` inside the value-capturing wrapper.

    A single expression becomes the arrow function's expression body so its
    value is returned implicitly; anything else becomes a block body and must
    use `return` to produce a value.
    """
    expression = sole_expression(body)
    if expression is not None:
        return _renderer.render(EXPRESSION_WRAPPER, {"body": expression})
    return _renderer.render(BLOCK_WRAPPER, {"body": body})


def assemble(imports: str, declarations: Iterable[str] | str, body: str, wrap_value: bool = False) -> str:
    if not isinstance(declarations, str):
        declarations = "\n".join(declarations)
    context = {
        "imports": imports,
        "declarations": declarations,
        "body": wrap(body) if wrap_value else body,
    }
    return _renderer.render(SCRIPT_TEMPLATE, context)


__all__ = ["assemble", "declare", "variable_assignments", "wrap"]
