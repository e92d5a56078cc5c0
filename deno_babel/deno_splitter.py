"""
Grammar-aware segmentation of TypeScript snippets.

The snippet is parsed with the tree-sitter TypeScript grammar and only the
direct children of the `program` node are inspected, so import-like text
inside strings, comments or nested scopes is never mistaken for an import.
All offsets reported by tree-sitter are byte offsets into the UTF-8 encoded
source; slicing therefore happens on bytes and is decoded afterwards.
"""
from typing import List, Optional, Tuple

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

TYPESCRIPT = Language(tree_sitter_typescript.language_typescript())

IMPORT_NODE_TYPES = frozenset({"import_statement"})

_parser: Optional[Parser] = None


def _get_parser() -> Parser:
    global _parser
    if _parser is None:
        _parser = Parser(TYPESCRIPT)
    return _parser


def parse(source: bytes) -> Tree:
    return _get_parser().parse(source)


def _top_level_imports(tree: Tree) -> List[Node]:
    return [node for node in tree.root_node.children if node.type in IMPORT_NODE_TYPES]


def import_nodes(snippet: str) -> List[str]:
    """Return the source text of every top-level import statement, in order."""
    source = snippet.encode("utf-8")
    return [
        source[node.start_byte:node.end_byte].decode("utf-8")
        for node in _top_level_imports(parse(source))
    ]


def _terminated(gap: bytes) -> bytes:
    if gap.rstrip().endswith(b";"):
        return gap
    # Own line, so a trailing line comment cannot swallow it.
    return gap + b"\n;"


def split(snippet: str) -> Tuple[str, str]:
    """
    Split a snippet into (imports, rest).

    `imports` holds each top-level import statement's exact text, one per
    line. `rest` is the buffer after the last import, preceded by any code
    that sat between imports (so hoisting never drops a statement). Whitespace
    gaps between imports are discarded; everything else is kept verbatim,
    followed by a `;` on its own line when it does not already end in one, so
    the moved code cannot run into the statement that follows it.
    """
    source = snippet.encode("utf-8")
    nodes = _top_level_imports(parse(source))
    if not nodes:
        return "", snippet

    statements = []
    displaced = []
    cursor = 0
    for node in nodes:
        gap = source[cursor:node.start_byte]
        if gap.strip():
            displaced.append(_terminated(gap))
        statements.append(source[node.start_byte:node.end_byte])
        cursor = node.end_byte

    imports = b"\n".join(statements).decode("utf-8")
    rest = (b"".join(displaced) + source[cursor:]).decode("utf-8")
    return imports, rest


def sole_expression(body: str) -> Optional[str]:
    """
    Return the text of `body`'s only top-level expression, without the
    trailing semicolon, or None when the body is anything else (several
    statements, a declaration, a syntax error).
    """
    source = body.encode("utf-8")
    tree = parse(source)
    if tree.root_node.has_error:
        return None
    statements = [n for n in tree.root_node.named_children if n.type != "comment"]
    if len(statements) != 1 or statements[0].type != "expression_statement":
        return None
    expressions = [n for n in statements[0].named_children if n.type != "comment"]
    if not expressions:
        return None
    expr = expressions[0]
    return source[expr.start_byte:expr.end_byte].decode("utf-8")


__all__ = ["split", "import_nodes", "sole_expression", "parse", "IMPORT_NODE_TYPES"]
