import pytest

from iriref import HostKind, InvalidIri, IriBuf, IriRefBuf
from iriref.parsing import parse_descriptor


def assert_consistent(buf):
    assert len(buf._data) == buf._p.length
    assert buf._p == parse_descriptor(buf.as_str())


def assert_unchanged(buf, mutate):
    data = buf.as_bytes()
    descriptor = buf._p.copy()
    with pytest.raises(InvalidIri):
        mutate(buf)
    assert buf.as_bytes() == data
    assert buf._p == descriptor


def test_build_from_parts():
    iri = IriBuf("https://www.rust-lang.org")
    iri.set_port("40")
    assert_consistent(iri)
    iri.set_path("/foo")
    assert_consistent(iri)
    iri.path_mut().push("bar")
    assert_consistent(iri)
    iri.set_query("query")
    assert_consistent(iri)
    iri.set_fragment("fragment")
    assert_consistent(iri)
    assert iri == "https://www.rust-lang.org:40/foo/bar?query#fragment"


def test_segment_editing():
    iri = IriBuf("https://rust-lang.org/a/c")
    path = iri.path_mut()
    path.pop()
    assert_consistent(iri)
    path.push("b")
    assert_consistent(iri)
    path.push("c/")
    assert_consistent(iri)
    assert iri.path == "/a/b/c/"
    assert str(path) == "/a/b/c/"


def test_set_query_with_hash_is_rejected_without_change():
    buf = IriRefBuf("http://a/b?q#f")
    assert_unchanged(buf, lambda b: b.set_query("x#y"))


def test_set_query():
    buf = IriRefBuf("http://a/b#f")
    buf.set_query("x=1")
    assert buf == "http://a/b?x=1#f"
    assert_consistent(buf)
    buf.set_query("")
    assert buf == "http://a/b?#f"
    assert buf.query == ""
    assert_consistent(buf)
    buf.set_query(None)
    assert buf == "http://a/b#f"
    assert buf.query is None
    assert_consistent(buf)
    buf.set_query(None)
    assert buf == "http://a/b#f"


def test_set_fragment():
    buf = IriRefBuf("http://a/b?q")
    buf.set_fragment("top")
    assert buf == "http://a/b?q#top"
    assert_consistent(buf)
    buf.set_fragment("a/b?c")
    assert buf == "http://a/b?q#a/b?c"
    assert_consistent(buf)
    buf.set_fragment("")
    assert buf == "http://a/b?q#"
    assert_consistent(buf)
    buf.set_fragment(None)
    assert buf == "http://a/b?q"
    assert_consistent(buf)
    assert_unchanged(buf, lambda b: b.set_fragment("a#b"))


def test_set_scheme():
    buf = IriRefBuf("//a/b")
    buf.set_scheme("http")
    assert buf == "http://a/b"
    assert_consistent(buf)
    buf.set_scheme("https")
    assert buf == "https://a/b"
    assert_consistent(buf)
    buf.set_scheme(None)
    assert buf == "//a/b"
    assert buf.scheme is None
    assert_consistent(buf)


def test_set_scheme_on_empty_reference():
    buf = IriRefBuf()
    buf.set_scheme("https")
    assert buf == "https:"
    assert buf.as_iri().scheme == "https"


@pytest.mark.parametrize("scheme", ["", "1http", "ht tp", "http:"])
def test_set_invalid_scheme(scheme):
    assert_unchanged(IriRefBuf("//a/b"), lambda b: b.set_scheme(scheme))


def test_removing_scheme_must_not_expose_colon_in_path():
    assert_unchanged(IriRefBuf("urn:isbn:0451450523"), lambda b: b.set_scheme(None))


def test_iri_keeps_its_scheme():
    assert_unchanged(IriBuf("http://a"), lambda b: b.set_scheme(None))


def test_set_authority():
    buf = IriRefBuf("http:/a")
    buf.set_authority("user@host:80")
    assert buf == "http://user@host:80/a"
    assert buf.authority.userinfo == "user"
    assert_consistent(buf)
    buf.set_authority("[::1]")
    assert buf == "http://[::1]/a"
    assert buf.authority.host_kind is HostKind.IPV6
    assert_consistent(buf)
    buf.set_authority("")
    assert buf == "http:///a"
    assert_consistent(buf)
    buf.set_authority(None)
    assert buf == "http:/a"
    assert buf.authority is None
    assert_consistent(buf)


@pytest.mark.parametrize("authority", ["a b", "host/path", "host:8x", "[::1", "a@b@c"])
def test_set_invalid_authority(authority):
    assert_unchanged(IriRefBuf("http://x/a"), lambda b: b.set_authority(authority))


def test_authority_needs_an_absolute_or_empty_path():
    assert_unchanged(IriRefBuf("http:a"), lambda b: b.set_authority("host"))


def test_removing_authority_must_not_expose_double_slash():
    assert_unchanged(IriRefBuf("http://h//a"), lambda b: b.set_authority(None))


def test_set_userinfo():
    buf = IriBuf("https://www.rust-lang.org/x")
    buf.set_userinfo("user:pw")
    assert buf == "https://user:pw@www.rust-lang.org/x"
    assert_consistent(buf)
    buf.set_userinfo("")
    assert buf == "https://@www.rust-lang.org/x"
    assert buf.authority.userinfo == ""
    assert_consistent(buf)
    buf.set_userinfo(None)
    assert buf == "https://www.rust-lang.org/x"
    assert_consistent(buf)
    assert_unchanged(buf, lambda b: b.set_userinfo("a@b"))


def test_set_host():
    buf = IriBuf("https://user@www.rust-lang.org:8080/x")
    buf.set_host("192.168.0.1")
    assert buf == "https://user@192.168.0.1:8080/x"
    assert buf.authority.host_kind is HostKind.IPV4
    assert_consistent(buf)
    buf.set_host("例え.jp")
    assert buf == "https://user@例え.jp:8080/x"
    assert buf.authority.host_kind is HostKind.REG_NAME
    assert_consistent(buf)
    assert_unchanged(buf, lambda b: b.set_host("a:1"))


def test_set_host_creates_authority():
    buf = IriBuf("file:/etc/hosts")
    buf.set_host("localhost")
    assert buf == "file://localhost/etc/hosts"
    assert_consistent(buf)


def test_set_port():
    buf = IriBuf("http://h/x")
    buf.set_port("8080")
    assert buf == "http://h:8080/x"
    assert_consistent(buf)
    buf.set_port("")
    assert buf == "http://h:/x"
    assert_consistent(buf)
    buf.set_port(None)
    assert buf == "http://h/x"
    assert_consistent(buf)
    assert_unchanged(buf, lambda b: b.set_port("8a"))


def test_userinfo_and_port_need_an_authority():
    assert_unchanged(IriBuf("mailto:a@b"), lambda b: b.set_port("80"))
    assert_unchanged(IriBuf("mailto:a@b"), lambda b: b.set_userinfo("me"))


def test_set_path():
    buf = IriRefBuf("http://a/b?q#f")
    buf.set_path("/c/d")
    assert buf == "http://a/c/d?q#f"
    assert_consistent(buf)
    buf.set_path("")
    assert buf == "http://a?q#f"
    assert_consistent(buf)


@pytest.mark.parametrize(
    "text,path",
    [
        ("http://a/b", "c"),
        ("http://a/b", "/x y"),
        ("http://a/b", "/b?c"),
        ("http:b", "//c"),
        ("b", "c:d"),
    ],
)
def test_set_invalid_path(text, path):
    assert_unchanged(IriRefBuf(text), lambda b: b.set_path(path))


def test_push_onto_empty_path_with_authority():
    buf = IriBuf("http://h?q")
    buf.path_mut().push("a")
    assert buf == "http://h/a?q"
    assert_consistent(buf)


def test_push_onto_relative_path():
    buf = IriRefBuf()
    path = buf.path_mut()
    path.push("a")
    path.push("b/")
    path.push("c")
    assert buf == "a/b/c"
    assert_consistent(buf)


@pytest.mark.parametrize("segment", ["a/b", "a b", "a?", "%zz", "a//"])
def test_push_invalid_segment(segment):
    assert_unchanged(IriRefBuf("http:/x"), lambda b: b.path_mut().push(segment))


def test_push_colon_segment_into_schemeless_path():
    assert_unchanged(IriRefBuf(), lambda b: b.path_mut().push("a:b"))
    buf = IriRefBuf("x")
    buf.path_mut().push("a:b")
    assert buf == "x/a:b"


def test_pop():
    buf = IriRefBuf("/a/b/?q")
    path = buf.path_mut()
    path.pop()
    assert buf == "/a?q"
    assert_consistent(buf)
    path.pop()
    assert buf == "/?q"
    assert_consistent(buf)
    path.pop()
    assert buf == "/?q"
    assert_consistent(buf)


def test_pop_empty_path_is_noop():
    buf = IriBuf("http://h#f")
    buf.path_mut().pop()
    assert buf == "http://h#f"
    assert_consistent(buf)


def test_normalize():
    buf = IriBuf("http://a/b/c/./../../g?q#f")
    buf.normalize()
    assert buf == "http://a/g?q#f"
    assert_consistent(buf)


def test_normalize_keeps_relative_reference_parseable():
    buf = IriRefBuf("a/../b:c?q")
    buf.path_mut().normalize()
    assert buf == "./b:c?q"
    assert_consistent(buf)


def test_normalize_is_idempotent():
    buf = IriRefBuf("x:/a/..//b")
    buf.normalize()
    assert buf == "x:/.//b"
    buf.normalize()
    assert buf == "x:/.//b"
    assert_consistent(buf)


def test_bytes_arguments():
    buf = IriRefBuf(b"http://a")
    buf.set_path(b"/p")
    buf.set_query(bytearray(b"q"))
    assert buf == "http://a/p?q"
    assert_consistent(buf)


def test_unicode_edits():
    buf = IriBuf("http://例え.jp/パス")
    buf.set_query("クエリ")
    assert_consistent(buf)
    buf.path_mut().push("ü")
    assert_consistent(buf)
    buf.set_fragment("断片")
    assert_consistent(buf)
    assert buf == "http://例え.jp/パス/ü?クエリ#断片"
    assert buf.query == "クエリ"
    assert buf.fragment == "断片"
