import pytest
from deno_babel.deno_splitter import split, import_nodes, sole_expression, parse


@pytest.mark.parametrize(
    "snippet",
    [
        "",
        "const x = 1;\nx + 1",
        "console.log('hi')\n",
        # import-looking text that is not an import statement
        "const s = \"import x from 'y'\";\ns",
        "// import x from \"y\"\nfoo();",
        "const m = await import(\"./m.ts\");\nm.run();",
    ],
)
def test_split_without_imports_is_identity(snippet):
    assert split(snippet) == ("", snippet)


def test_split_single_import():
    snippet = 'import { a } from "./a.ts";\nconsole.log(a);\n'
    imports, rest = split(snippet)
    assert imports == 'import { a } from "./a.ts";'
    assert rest == "\nconsole.log(a);\n"


def test_split_multiline_import_kept_whole():
    stmt = 'import {\n  a,\n  b,\n} from "./mod.ts";'
    imports, rest = split(stmt + "\nfoo(a, b);")
    assert imports == stmt
    assert rest == "\nfoo(a, b);"


def test_split_contiguous_imports_one_per_line():
    snippet = 'import a from "a";\nimport * as b from "b";\nrun();'
    imports, rest = split(snippet)
    assert imports == 'import a from "a";\nimport * as b from "b";'
    assert rest == "\nrun();"


def test_split_without_semicolons():
    snippet = 'import a from "a"\nimport b from "b"\nrun()'
    imports, rest = split(snippet)
    assert imports == 'import a from "a"\nimport b from "b"'
    assert rest == "\nrun()"


def test_split_hoists_non_contiguous_imports_without_losing_code():
    snippet = 'import a from "a";\nsetup();\nimport b from "b";\nrun();'
    imports, rest = split(snippet)
    assert imports == 'import a from "a";\nimport b from "b";'
    assert "import" not in rest
    assert rest.count("setup();") == 1
    assert rest.count("run();") == 1
    assert rest.index("setup();") < rest.index("run();")


def _statement_types(source):
    tree = parse(source.encode("utf-8"))
    assert not tree.root_node.has_error
    return [n.type for n in tree.root_node.named_children if n.type not in ("comment", "empty_statement")]


def test_split_moved_code_stays_a_separate_statement():
    snippet = 'import a from "a"\nfoo()\nimport b from "b"\n(x)'
    imports, rest = split(snippet)
    assert imports == 'import a from "a"\nimport b from "b"'
    assert rest == "\nfoo()\n\n;\n(x)"
    assert _statement_types(rest) == ["expression_statement", "expression_statement"]


def test_split_moved_code_ending_in_line_comment():
    snippet = 'import a from "a"\nfoo() // note\nimport b from "b"\n[1].map(f)'
    _, rest = split(snippet)
    assert rest.count(";") == 1
    assert _statement_types(rest) == ["expression_statement", "expression_statement"]


def test_split_moved_code_already_terminated_is_unchanged():
    snippet = 'import a from "a";\nsetup();\nimport b from "b";\nrun();'
    _, rest = split(snippet)
    assert rest == "\nsetup();\n\nrun();"


def test_split_rest_preserves_whitespace_after_boundary():
    snippet = 'import a from "a";\n\n\n  a()  \n'
    _, rest = split(snippet)
    assert rest == "\n\n\n  a()  \n"


def test_split_handles_non_ascii_text():
    snippet = 'import a from "./ünïcödé.ts";\nconst s = "héllo";'
    imports, rest = split(snippet)
    assert imports == 'import a from "./ünïcödé.ts";'
    assert rest == '\nconst s = "héllo";'


def test_split_type_imports():
    snippet = 'import type { Foo } from "./types.ts";\nconst f: Foo = {};'
    imports, rest = split(snippet)
    assert imports == 'import type { Foo } from "./types.ts";'
    assert rest == "\nconst f: Foo = {};"


def test_import_nodes_in_source_order():
    snippet = 'import b from "b";\nimport a from "a";\n'
    assert import_nodes(snippet) == ['import b from "b";', 'import a from "a";']


@pytest.mark.parametrize(
    "body,expected",
    [
        ("1 + 1", "1 + 1"),
        ("1 + 1;", "1 + 1"),
        ("  [1, 2, 3]  \n", "[1, 2, 3]"),
        ("await Promise.resolve(3)", "await Promise.resolve(3)"),
        ("const x = 1;\nx", None),
        ("let y = 2;", None),
        ("", None),
        ("if (true) { 1 }", None),
    ],
)
def test_sole_expression(body, expected):
    assert sole_expression(body) == expected
