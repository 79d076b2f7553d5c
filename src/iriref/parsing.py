"""iriref.parsing
Decomposition of IRI references into a Descriptor.

A Descriptor records only the byte lengths of the components of the text it
was parsed from; the text itself is never copied. Offsets are derived from
those lengths, so a Descriptor stays correct as long as its lengths are
updated together with the buffer they describe.
"""

import dataclasses
import logging

from typing import Self

from .grammar import (
    HostKind,
    scan_fragment,
    scan_host,
    scan_path,
    scan_port,
    scan_query,
    scan_scheme,
    scan_userinfo,
)

logger = logging.getLogger(__name__)

ENCODING: str = "utf-8"


class InvalidIri(ValueError):
    """Text that is not a valid IRI, IRI reference or IRI component."""


def decode(data: str | bytes | bytearray | memoryview) -> str:
    """Text view of data for the scanners.

    Malformed UTF-8 is decoded to lone surrogates, which no IRI production
    accepts, so it is reported as an invalid IRI rather than a decode error.
    """
    if isinstance(data, str):
        return data
    return bytes(data).decode(ENCODING, errors="surrogateescape")


def byte_len(text: str) -> int:
    if text.isascii():
        return len(text)
    return len(text.encode(ENCODING, errors="surrogateescape"))


@dataclasses.dataclass
class AuthorityDescriptor:
    """Lengths of the parts of `[ iuserinfo "@" ] ihost [ ":" port ]`."""

    userinfo_len: int | None
    host_len: int
    host_kind: HostKind
    port_len: int | None

    @property
    def length(self: Self) -> int:
        result: int = self.host_len
        if self.userinfo_len is not None:
            result += self.userinfo_len + 1
        if self.port_len is not None:
            result += self.port_len + 1
        return result

    def host_offset(self: Self, offset: int) -> int:
        """Offset of the host, given the offset of the authority."""
        if self.userinfo_len is None:
            return offset
        return offset + self.userinfo_len + 1

    def port_offset(self: Self, offset: int) -> int:
        return self.host_offset(offset) + self.host_len + 1


@dataclasses.dataclass
class Descriptor:
    """Component lengths of `scheme ":" "//" authority path "?" query "#" fragment`.

    None marks an absent component, which is not the same as an empty one:
    "http://a?" has an empty query, "http://a" has none.
    """

    scheme_len: int | None = None
    authority: AuthorityDescriptor | None = None
    path_len: int = 0
    query_len: int | None = None
    fragment_len: int | None = None

    def copy(self: Self) -> Self:
        if self.authority is None:
            return dataclasses.replace(self)
        return dataclasses.replace(self, authority=dataclasses.replace(self.authority))

    @property
    def scheme_end(self: Self) -> int:
        """End of the scheme, including its ":" separator."""
        if self.scheme_len is None:
            return 0
        return self.scheme_len + 1

    @property
    def authority_offset(self: Self) -> int:
        """Start of the authority, after its "//". Defined even without an authority."""
        if self.authority is None:
            return self.scheme_end
        return self.scheme_end + 2

    @property
    def authority_end(self: Self) -> int:
        if self.authority is None:
            return self.scheme_end
        return self.authority_offset + self.authority.length

    @property
    def path_offset(self: Self) -> int:
        return self.authority_end

    @property
    def path_end(self: Self) -> int:
        return self.path_offset + self.path_len

    @property
    def query_offset(self: Self) -> int:
        if self.query_len is None:
            return self.path_end
        return self.path_end + 1

    @property
    def query_end(self: Self) -> int:
        if self.query_len is None:
            return self.path_end
        return self.query_offset + self.query_len

    @property
    def fragment_offset(self: Self) -> int:
        if self.fragment_len is None:
            return self.query_end
        return self.query_end + 1

    @property
    def length(self: Self) -> int:
        if self.fragment_len is None:
            return self.query_end
        return self.fragment_offset + self.fragment_len


def parse_authority(text: str, start: int) -> tuple[AuthorityDescriptor, int]:
    """Parse `[ iuserinfo "@" ] ihost [ ":" port ]` greedily from start.

    Returns the descriptor and the character offset where the authority ends.
    Whatever follows is left for the caller to validate.
    """
    pos: int = start

    userinfo_len: int | None = None
    userinfo_chars: int = scan_userinfo(text, pos)
    if text.startswith("@", pos + userinfo_chars):
        userinfo_len = byte_len(text[pos : pos + userinfo_chars])
        pos += userinfo_chars + 1

    host_chars: int
    host_kind: HostKind
    host_chars, host_kind = scan_host(text, pos)
    host_len: int = byte_len(text[pos : pos + host_chars])
    pos += host_chars

    port_len: int | None = None
    if text.startswith(":", pos):
        port_len = scan_port(text, pos + 1)
        pos += port_len + 1

    return AuthorityDescriptor(userinfo_len, host_len, host_kind, port_len), pos


def check_path(path: str, has_scheme: bool, has_authority: bool) -> bool:
    """True if path can follow the given components and re-parse as a path.

    ipath-abempty after an authority; ipath-absolute or ipath-rootless after a
    scheme alone; ipath-noscheme (no ":" in the first segment) otherwise.
    """
    if has_authority:
        return len(path) == 0 or path.startswith("/")
    if path.startswith("//"):
        return False
    if not has_scheme:
        first_segment: str = path.partition("/")[0]
        return ":" not in first_segment
    return True


def _fail(text: str, pos: int, reason: str) -> InvalidIri:
    logger.debug("rejected %r at offset %d: %s", text, pos, reason)
    return InvalidIri("parse failed")


def parse_descriptor(text: str, require_scheme: bool = False) -> Descriptor:
    """Parse `[ scheme ":" ] ihier-part [ "?" iquery ] [ "#" ifragment ]`.

    The whole of text must be consumed. A missing scheme is only accepted
    when require_scheme is false, i.e. for IRI references.
    """
    result: Descriptor = Descriptor()
    pos: int = 0

    scheme_len: int = scan_scheme(text, 0)
    if scheme_len > 0 and text.startswith(":", scheme_len):
        result.scheme_len = scheme_len
        pos = scheme_len + 1
    elif require_scheme:
        raise _fail(text, 0, "missing scheme")

    if text.startswith("//", pos):
        result.authority, pos = parse_authority(text, pos + 2)

    path_chars: int = scan_path(text, pos)
    path: str = text[pos : pos + path_chars]
    if not check_path(path, result.scheme_len is not None, result.authority is not None):
        raise _fail(text, pos, "path not allowed here")
    result.path_len = byte_len(path)
    pos += path_chars

    if text.startswith("?", pos):
        query_chars: int = scan_query(text, pos + 1)
        result.query_len = byte_len(text[pos + 1 : pos + 1 + query_chars])
        pos += query_chars + 1

    if text.startswith("#", pos):
        fragment_chars: int = scan_fragment(text, pos + 1)
        result.fragment_len = byte_len(text[pos + 1 : pos + 1 + fragment_chars])
        pos += fragment_chars + 1

    if pos != len(text):
        raise _fail(text, pos, "unexpected character")

    return result
