"""iriref.grammar
Scanners for the IRI productions of RFC 3986 and RFC 3987.

Every scanner takes the text and a start offset and returns how many
characters from that offset match the production, as greedily as the ABNF
allows. A scanner never fails: a result shorter than the candidate text means
the candidate is not valid in that position, and callers must check for that.
"""

import enum
import re

from typing import Callable

# Each of these ABNF rules is from RFC 3986, 3987, or 5234.
# Rules that only ever appear inside a bracket expression are kept as
# character-class bodies, so they can be combined without nesting groups.

# ALPHA = %x41-5A / %x61-7A
_ALPHA: str = "A-Za-z"

# DIGIT = %x30-39
_DIGIT: str = "0-9"

# HEXDIG = DIGIT / "A" / "B" / "C" / "D" / "E" / "F"
_HEXDIG: str = "0-9A-Fa-f"

# ucschar = %xA0-D7FF / %xF900-FDCF / %xFDF0-FFEF
#         / %x10000-1FFFD / %x20000-2FFFD / %x30000-3FFFD
#         / %x40000-4FFFD / %x50000-5FFFD / %x60000-6FFFD
#         / %x70000-7FFFD / %x80000-8FFFD / %x90000-9FFFD
#         / %xA0000-AFFFD / %xB0000-BFFFD / %xC0000-CFFFD
#         / %xD0000-DFFFD / %xE1000-EFFFD
_UCSCHAR: str = (
    "\xa0-\ud7ff\uf900-\ufdcf\ufdf0-\uffef"
    "\U00010000-\U0001fffd\U00020000-\U0002fffd\U00030000-\U0003fffd"
    "\U00040000-\U0004fffd\U00050000-\U0005fffd\U00060000-\U0006fffd"
    "\U00070000-\U0007fffd\U00080000-\U0008fffd\U00090000-\U0009fffd"
    "\U000a0000-\U000afffd\U000b0000-\U000bfffd\U000c0000-\U000cfffd"
    "\U000d0000-\U000dfffd\U000e1000-\U000efffd"
)

# iprivate = %xE000-F8FF / %xF0000-FFFFD / %x100000-10FFFD
_IPRIVATE: str = "\ue000-\uf8ff\U000f0000-\U000ffffd\U00100000-\U0010fffd"

# unreserved = ALPHA / DIGIT / "-" / "." / "_" / "~"
_UNRESERVED: str = rf"{_ALPHA}{_DIGIT}\-._~"

# iunreserved = ALPHA / DIGIT / "-" / "." / "_" / "~" / ucschar
_IUNRESERVED: str = f"{_UNRESERVED}{_UCSCHAR}"

# sub-delims = "!" / "$" / "&" / "'" / "(" / ")" / "*" / "+" / "," / ";" / "="
_SUB_DELIMS: str = r"!$&'()*+,;="

# pct-encoded = "%" HEXDIG HEXDIG
_PCT_ENCODED: str = rf"%[{_HEXDIG}][{_HEXDIG}]"

# ipchar = iunreserved / pct-encoded / sub-delims / ":" / "@"
_IPCHAR: str = rf"(?:[{_IUNRESERVED}{_SUB_DELIMS}:@]|{_PCT_ENCODED})"

# scheme = ALPHA *( ALPHA / DIGIT / "+" / "-" / "." )
_SCHEME: str = rf"[{_ALPHA}][{_ALPHA}{_DIGIT}+\-.]*"

# iuserinfo = *( iunreserved / pct-encoded / sub-delims / ":" )
_IUSERINFO: str = rf"(?:[{_IUNRESERVED}{_SUB_DELIMS}:]|{_PCT_ENCODED})*"

# dec-octet = DIGIT / %x31-39 DIGIT / "1" 2DIGIT / "2" %x30-34 DIGIT / "25" %x30-35
# (longest alternatives first, the match is taken without backtracking)
_DEC_OCTET: str = r"(?:25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9][0-9]|[0-9])"

# IPv4address = dec-octet "." dec-octet "." dec-octet "." dec-octet
_IPV4ADDRESS: str = rf"{_DEC_OCTET}\.{_DEC_OCTET}\.{_DEC_OCTET}\.{_DEC_OCTET}"

# h16 = 1*4HEXDIG
_H16: str = rf"[{_HEXDIG}]{{1,4}}"

# ls32 = ( h16 ":" h16 ) / IPv4address
_LS32: str = rf"(?:{_H16}:{_H16}|{_IPV4ADDRESS})"

# IPv6address =                            6( h16 ":" ) ls32
#             /                       "::" 5( h16 ":" ) ls32
#             / [               h16 ] "::" 4( h16 ":" ) ls32
#             / [ *1( h16 ":" ) h16 ] "::" 3( h16 ":" ) ls32
#             / [ *2( h16 ":" ) h16 ] "::" 2( h16 ":" ) ls32
#             / [ *3( h16 ":" ) h16 ] "::"    h16 ":"   ls32
#             / [ *4( h16 ":" ) h16 ] "::"              ls32
#             / [ *5( h16 ":" ) h16 ] "::"              h16
#             / [ *6( h16 ":" ) h16 ] "::"
_IPV6ADDRESS: str = "(?:" + "|".join(
    (
        rf"(?:{_H16}:){{6}}{_LS32}",
        rf"::(?:{_H16}:){{5}}{_LS32}",
        rf"(?:{_H16})?::(?:{_H16}:){{4}}{_LS32}",
        rf"(?:(?:{_H16}:){{0,1}}{_H16})?::(?:{_H16}:){{3}}{_LS32}",
        rf"(?:(?:{_H16}:){{0,2}}{_H16})?::(?:{_H16}:){{2}}{_LS32}",
        rf"(?:(?:{_H16}:){{0,3}}{_H16})?::{_H16}:{_LS32}",
        rf"(?:(?:{_H16}:){{0,4}}{_H16})?::{_LS32}",
        rf"(?:(?:{_H16}:){{0,5}}{_H16})?::{_H16}",
        rf"(?:(?:{_H16}:){{0,6}}{_H16})?::",
    )
) + ")"

# IPvFuture = "v" 1*HEXDIG "." 1*( unreserved / sub-delims / ":" )
_IPVFUTURE: str = rf"[vV][{_HEXDIG}]+\.[{_UNRESERVED}{_SUB_DELIMS}:]+"

# IP-literal = "[" ( IPv6address / IPvFuture ) "]"
# (RFC 3987 has no IPv6addrz, zone identifiers are not part of IRIs)
_IP_LITERAL: str = rf"\[(?:{_IPV6ADDRESS}|{_IPVFUTURE})\]"

# ireg-name = *( iunreserved / pct-encoded / sub-delims )
_IREG_NAME: str = rf"(?:[{_IUNRESERVED}{_SUB_DELIMS}]|{_PCT_ENCODED})*"

# port = *DIGIT
_PORT: str = rf"[{_DIGIT}]*"

# isegment = *ipchar
_ISEGMENT: str = rf"{_IPCHAR}*"

# ipath = ipath-abempty / ipath-absolute / ipath-noscheme / ipath-rootless / ipath-empty
# Every one of those is a run of ipchar and "/"; which one applies depends
# on the surrounding components and is checked by the parser.
_IPATH: str = rf"(?:[{_IUNRESERVED}{_SUB_DELIMS}:@/]|{_PCT_ENCODED})*"

# iquery = *( ipchar / iprivate / "/" / "?" )
_IQUERY: str = rf"(?:[{_IUNRESERVED}{_IPRIVATE}{_SUB_DELIMS}:@/?]|{_PCT_ENCODED})*"

# ifragment = *( ipchar / "/" / "?" )
_IFRAGMENT: str = rf"(?:[{_IUNRESERVED}{_SUB_DELIMS}:@/?]|{_PCT_ENCODED})*"

_SCHEME_PAT: re.Pattern[str] = re.compile(_SCHEME)
_IUSERINFO_PAT: re.Pattern[str] = re.compile(_IUSERINFO)
_IP_LITERAL_PAT: re.Pattern[str] = re.compile(_IP_LITERAL)
_IPV4ADDRESS_PAT: re.Pattern[str] = re.compile(_IPV4ADDRESS)
_IREG_NAME_PAT: re.Pattern[str] = re.compile(_IREG_NAME)
_PORT_PAT: re.Pattern[str] = re.compile(_PORT)
_ISEGMENT_PAT: re.Pattern[str] = re.compile(_ISEGMENT)
_IPATH_PAT: re.Pattern[str] = re.compile(_IPATH)
_IQUERY_PAT: re.Pattern[str] = re.compile(_IQUERY)
_IFRAGMENT_PAT: re.Pattern[str] = re.compile(_IFRAGMENT)


class HostKind(enum.Enum):
    """Which alternative of the ihost rule a host matched."""

    REG_NAME = 1
    IPV4 = 2
    IPV6 = 3
    IP_FUTURE = 4


def _match_len(pattern: re.Pattern[str], text: str, start: int) -> int:
    m: re.Match[str] | None = pattern.match(text, start)
    if m is None:
        return 0
    return m.end() - start


def scan_scheme(text: str, start: int = 0) -> int:
    return _match_len(_SCHEME_PAT, text, start)


def scan_userinfo(text: str, start: int = 0) -> int:
    return _match_len(_IUSERINFO_PAT, text, start)


def scan_host(text: str, start: int = 0) -> tuple[int, HostKind]:
    """Scan an ihost, trying IP-literal, IPv4address and ireg-name in that order.

    An IPv4address only wins when the ireg-name rule would match exactly the
    same characters (RFC 3986 section 3.2.2), so "1.2.3.4" is an IPv4 host and
    "1.2.3.4.example" is a registered name.
    """
    if text.startswith("[", start):
        length: int = _match_len(_IP_LITERAL_PAT, text, start)
        if length == 0:
            return 0, HostKind.REG_NAME
        if text[start + 1] in "vV":
            return length, HostKind.IP_FUTURE
        return length, HostKind.IPV6

    reg_name_len: int = _match_len(_IREG_NAME_PAT, text, start)
    ipv4_len: int = _match_len(_IPV4ADDRESS_PAT, text, start)
    if ipv4_len > 0 and ipv4_len == reg_name_len:
        return ipv4_len, HostKind.IPV4
    return reg_name_len, HostKind.REG_NAME


def scan_port(text: str, start: int = 0) -> int:
    return _match_len(_PORT_PAT, text, start)


def scan_path(text: str, start: int = 0) -> int:
    return _match_len(_IPATH_PAT, text, start)


def scan_segment(text: str, start: int = 0) -> int:
    return _match_len(_ISEGMENT_PAT, text, start)


def scan_query(text: str, start: int = 0) -> int:
    return _match_len(_IQUERY_PAT, text, start)


def scan_fragment(text: str, start: int = 0) -> int:
    return _match_len(_IFRAGMENT_PAT, text, start)


def is_valid(scanner: Callable[[str, int], int], text: str) -> bool:
    """True if scanner matches the whole of text, not just a prefix of it."""
    return scanner(text, 0) == len(text)
