import pytest
from deno_babel.deno_permissions import format_permission, format_permissions, permission_flags


@pytest.mark.parametrize(
    "entry,expected",
    [
        ("net", "--allow-net"),
        (("read", ["/tmp"]), "--allow-read=/tmp"),
        (("write", ["/a", "/b"]), "--allow-write=/a,/b"),
        (["net", ["example.com", "deno.land"]], "--allow-net=example.com,deno.land"),
        (("net", [8000, 8001]), "--allow-net=8000,8001"),
        (("env", "HOME"), "--allow-env=HOME"),
        (("sys",), "--allow-sys"),
        ("made-up", "--allow-made-up"),
    ],
)
def test_format_permission(entry, expected):
    assert format_permission(entry) == expected


def test_format_permissions_preserves_order():
    assert format_permissions([("read", ["/tmp"]), "net"]) == "--allow-read=/tmp --allow-net"
    assert format_permissions(["net", ("read", ["/tmp"])]) == "--allow-net --allow-read=/tmp"


def test_permission_flags_edge_cases():
    assert permission_flags(None) == []
    assert permission_flags([]) == []
    assert permission_flags("env") == ["--allow-env"]
    assert format_permissions([]) == ""
