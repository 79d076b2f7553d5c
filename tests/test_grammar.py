import pytest

from iriref.grammar import (
    HostKind,
    is_valid,
    scan_fragment,
    scan_host,
    scan_path,
    scan_port,
    scan_query,
    scan_scheme,
    scan_segment,
    scan_userinfo,
)


def test_scheme_stops_at_colon():
    assert scan_scheme("http://example.org") == 4
    assert scan_scheme("svn+ssh://host") == 7


def test_scheme_must_start_with_a_letter():
    assert scan_scheme("1http:") == 0
    assert scan_scheme("+a:") == 0


def test_scan_from_offset():
    text = "http://example.org"
    assert scan_host(text, 7) == (11, HostKind.REG_NAME)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("example.org/path", (11, HostKind.REG_NAME)),
        ("192.168.0.1:80", (11, HostKind.IPV4)),
        ("255.255.255.255", (15, HostKind.IPV4)),
        ("1.2.3.4x", (8, HostKind.REG_NAME)),
        ("1.2.3.256", (9, HostKind.REG_NAME)),
        ("1.2.3", (5, HostKind.REG_NAME)),
        ("[::1]:8080", (5, HostKind.IPV6)),
        ("[2001:db8::7]", (13, HostKind.IPV6)),
        ("[::ffff:192.0.2.1]", (18, HostKind.IPV6)),
        ("[v1.fe:x]", (9, HostKind.IP_FUTURE)),
        ("[::1", (0, HostKind.REG_NAME)),
        ("[fe80::1%25eth0]", (0, HostKind.REG_NAME)),
        ("", (0, HostKind.REG_NAME)),
        ("exa%6dple.org", (13, HostKind.REG_NAME)),
        ("例え.jp/", (5, HostKind.REG_NAME)),
    ],
)
def test_host_priority(text, expected):
    assert scan_host(text) == expected


def test_userinfo_allows_colon_but_not_at():
    assert scan_userinfo("user:pw@host") == 7


def test_port_is_digits_only():
    assert scan_port("8080/") == 4
    assert scan_port("x") == 0


def test_percent_triplets():
    assert scan_segment("a%2Fb") == 5
    assert scan_segment("a%2G") == 1
    assert scan_segment("%") == 0


def test_path_stops_at_query_and_fragment():
    assert scan_path("/a/b?q") == 4
    assert scan_path("/a/b#f") == 4
    assert scan_path("/a b") == 2


def test_segment_stops_at_slash():
    assert scan_segment("abc/def") == 3


def test_unicode_path():
    path = "/wiki/Ῥόδος"
    assert scan_path(path) == len(path)


def test_query_allows_question_mark_and_slash():
    assert scan_query("a?b/c#d") == 5


def test_query_allows_private_use_characters_but_fragment_does_not():
    private = chr(0xE000)
    assert scan_query(private) == 1
    assert scan_fragment(private) == 0


def test_fragment_stops_at_hash():
    assert scan_fragment("a#b") == 1


def test_malformed_utf8_never_matches():
    assert scan_path(b"/a\xff".decode("utf-8", errors="surrogateescape")) == 2


def test_is_valid_requires_full_match():
    assert is_valid(scan_port, "80")
    assert not is_valid(scan_port, "8a")
    assert is_valid(scan_query, "")
    assert not is_valid(scan_query, "a#b")
