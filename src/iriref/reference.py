"""iriref.reference
IRI and IRI reference values.

`IriRef` and `Iri` are read-only views over an immutable `bytes` object.
`IriRefBuf` and `IriBuf` own a `bytearray` and edit it in place. The `Iri`
variants additionally require a scheme. All four keep the text exactly as
it was given: nothing is normalized unless asked for.
"""

import dataclasses
import functools
import logging

from typing import Callable, ClassVar, Self

from .buffer import replace
from .comparison import equivalent
from .grammar import (
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
from .parsing import (
    ENCODING,
    AuthorityDescriptor,
    Descriptor,
    InvalidIri,
    byte_len,
    check_path,
    decode,
    parse_authority,
    parse_descriptor,
)
from .path import Path, normalize_for, pop_segment
from .resolution import resolve_prefix

logger = logging.getLogger(__name__)

Text = str | bytes | bytearray


@dataclasses.dataclass(frozen=True)
class Authority:
    """userinfo@host:port"""

    userinfo: str | None
    host: str
    host_kind: HostKind
    port: str | None

    def __str__(self: Self) -> str:
        result: str = ""
        if self.userinfo is not None:
            result += f"{self.userinfo}@"
        result += self.host
        if self.port is not None:
            result += f":{self.port}"
        return result


def _component(value: Text, scanner: Callable[[str, int], int], name: str) -> bytes:
    """Encoded value, if all of it matches scanner."""
    text: str = decode(value)
    if not is_valid(scanner, text):
        logger.debug("rejected %s %r", name, text)
        raise InvalidIri(f"invalid {name}")
    return text.encode(ENCODING)


@functools.total_ordering
class _Components:
    """Component accessors shared by the borrowed and the owned types."""

    __slots__ = ("_data", "_p")

    _data: bytes | bytearray
    _p: Descriptor

    _require_scheme: ClassVar[bool] = False
    _storage: ClassVar[type] = bytes

    def __init__(self: Self, data: "Text | _Components") -> None:
        raw: bytes
        if isinstance(data, _Components):
            if self._require_scheme and data._p.scheme_len is None:
                raise InvalidIri("missing scheme")
            raw, self._p = bytes(data._data), data._p.copy()
        else:
            text: str = decode(data)
            self._p = parse_descriptor(text, self._require_scheme)
            raw = data if isinstance(data, bytes) else text.encode(ENCODING)
        self._data = self._storage(raw)

    @classmethod
    def _from_parts(cls, data: bytes | bytearray, p: Descriptor) -> Self:
        result: Self = cls.__new__(cls)
        result._data = cls._storage(data)
        result._p = p
        return result

    def _span(self: Self, start: int, end: int) -> str:
        return self._data[start:end].decode(ENCODING)

    @property
    def scheme(self: Self) -> str | None:
        if self._p.scheme_len is None:
            return None
        return self._span(0, self._p.scheme_len)

    @property
    def authority(self: Self) -> Authority | None:
        authority: AuthorityDescriptor | None = self._p.authority
        if authority is None:
            return None
        offset: int = self._p.authority_offset
        userinfo: str | None = None
        if authority.userinfo_len is not None:
            userinfo = self._span(offset, offset + authority.userinfo_len)
        host_offset: int = authority.host_offset(offset)
        port: str | None = None
        if authority.port_len is not None:
            port_offset: int = authority.port_offset(offset)
            port = self._span(port_offset, port_offset + authority.port_len)
        return Authority(
            userinfo=userinfo,
            host=self._span(host_offset, host_offset + authority.host_len),
            host_kind=authority.host_kind,
            port=port,
        )

    @property
    def path(self: Self) -> Path:
        return Path(self._span(self._p.path_offset, self._p.path_end))

    @property
    def query(self: Self) -> str | None:
        if self._p.query_len is None:
            return None
        return self._span(self._p.query_offset, self._p.query_end)

    @property
    def fragment(self: Self) -> str | None:
        if self._p.fragment_len is None:
            return None
        return self._span(self._p.fragment_offset, self._p.length)

    def as_bytes(self: Self) -> bytes:
        return bytes(self._data)

    def as_str(self: Self) -> str:
        return self._data.decode(ENCODING)

    def as_iri(self: Self) -> "Iri":
        """This reference as an IRI; fails if it has no scheme."""
        if self._p.scheme_len is None:
            raise InvalidIri("missing scheme")
        return Iri._from_parts(bytes(self._data), self._p.copy())

    def as_iri_ref(self: Self) -> "IriRef":
        return IriRef._from_parts(bytes(self._data), self._p.copy())

    def to_owned(self: Self) -> "IriRefBuf":
        owned: type[IriRefBuf] = IriBuf if self._require_scheme else IriRefBuf
        return owned._from_parts(self._data, self._p.copy())

    def equivalent(self: Self, other: "Text | _Components") -> bool:
        """Percent-decoding and dot-segment aware comparison, see iriref.comparison."""
        if not isinstance(other, _Components):
            other = IriRef(other)
        return equivalent(self, other)

    def resolved(self: Self, base: "Text | _Components") -> "IriBuf":
        """A new IRI: this reference resolved against base."""
        base_data, base_p = _base_parts(base)
        prefix, p = resolve_prefix(base_data, base_p, self._data, self._p)
        data: bytearray = bytearray(prefix)
        if self._p.fragment_len is not None:
            data += self._data[self._p.query_end : self._p.length]
        return IriBuf._from_parts(data, p)

    def __str__(self: Self) -> str:
        return self.as_str()

    def __bytes__(self: Self) -> bytes:
        return self.as_bytes()

    def __repr__(self: Self) -> str:
        return f"{self.__class__.__name__}({self.as_str()!r})"

    def __len__(self: Self) -> int:
        return len(self._data)

    def _raw(self: Self, other: object) -> bytes | bytearray | None:
        if isinstance(other, _Components):
            return other._data
        if isinstance(other, str):
            return other.encode(ENCODING, errors="surrogatepass")
        if isinstance(other, (bytes, bytearray)):
            return other
        return None

    def __eq__(self: Self, other: object) -> bool:
        """Byte equality. See equivalent() for the semantic comparison."""
        raw: bytes | bytearray | None = self._raw(other)
        if raw is None:
            return NotImplemented
        return self._data == raw

    def __lt__(self: Self, other: object) -> bool:
        raw: bytes | bytearray | None = self._raw(other)
        if raw is None:
            return NotImplemented
        return self._data < raw


def _base_parts(base: "Text | _Components") -> tuple[bytes | bytearray, Descriptor]:
    if not isinstance(base, _Components):
        base = Iri(base)
    return base._data, base._p


class IriRef(_Components):
    """A borrowed IRI reference: an IRI, or a relative reference without scheme.

    Constructing one from bytes keeps a reference to those bytes.
    """

    __slots__ = ()

    def __hash__(self: Self) -> int:
        return hash(self.as_str())


class Iri(IriRef):
    """A borrowed IRI. Like IriRef, but the scheme is mandatory."""

    __slots__ = ()

    _require_scheme = True


class PathMut:
    """Segment-level editing of the path of an owned IRI reference."""

    __slots__ = ("_buffer",)

    def __init__(self: Self, buffer: "IriRefBuf") -> None:
        self._buffer = buffer

    def __str__(self: Self) -> str:
        return str(self._buffer.path)

    def push(self: Self, segment: Text) -> None:
        """Append segment, adding a "/" separator when needed.

        The segment may end with "/", which leaves the path with a trailing
        slash: pushing "b" then "c/" onto "/a" gives "/a/b/c/".
        """
        text: str = decode(segment)
        if not is_valid(scan_segment, text.removesuffix("/")):
            logger.debug("rejected segment %r", text)
            raise InvalidIri("invalid segment")

        buffer: IriRefBuf = self._buffer
        p: Descriptor = buffer._p
        path: Path = buffer.path
        if path.endswith("/") or (path.is_empty and p.authority is None):
            addition: str = text
        else:
            addition = "/" + text
        if not check_path(path + addition, p.scheme_len is not None, p.authority is not None):
            raise InvalidIri("invalid path")

        raw: bytes = addition.encode(ENCODING)
        buffer._replace(p.path_end, p.path_end, raw)
        p.path_len += len(raw)

    def pop(self: Self) -> None:
        """Remove the last segment. Does nothing on an empty path or "/"."""
        buffer: IriRefBuf = self._buffer
        p: Descriptor = buffer._p
        new_len: int = byte_len(pop_segment(buffer.path))
        buffer._replace(p.path_offset + new_len, p.path_end, b"")
        p.path_len = new_len

    def normalize(self: Self) -> None:
        """Remove the dot segments of the path, in place."""
        self._buffer.normalize()


class IriRefBuf(_Components):
    """An owned, editable IRI reference.

    Every setter validates its argument before touching the buffer: on
    InvalidIri the reference is left exactly as it was.
    """

    __slots__ = ()

    _storage = bytearray

    _data: bytearray

    __hash__ = None  # type: ignore[assignment]

    def __init__(self: Self, data: "Text | _Components" = "") -> None:
        super().__init__(data)

    def _replace(self: Self, start: int, end: int, content: bytes) -> None:
        replace(self._data, start, end, content)

    def set_scheme(self: Self, scheme: Text | None) -> None:
        p: Descriptor = self._p
        if scheme is None:
            if self._require_scheme:
                raise InvalidIri("an IRI must have a scheme")
            if p.scheme_len is None:
                return
            if not check_path(self.path, False, p.authority is not None):
                raise InvalidIri("path would be read as a scheme")
            self._replace(0, p.scheme_end, b"")
            p.scheme_len = None
            return

        raw: bytes = _component(scheme, scan_scheme, "scheme")
        if len(raw) == 0:
            raise InvalidIri("invalid scheme")
        if p.scheme_len is None:
            self._replace(0, 0, b":")
            self._replace(0, 0, raw)
        else:
            self._replace(0, p.scheme_len, raw)
        p.scheme_len = len(raw)

    def set_authority(self: Self, authority: Text | None) -> None:
        p: Descriptor = self._p
        if authority is None:
            if p.authority is None:
                return
            if not check_path(self.path, p.scheme_len is not None, False):
                raise InvalidIri("path would be read as an authority")
            self._replace(p.scheme_end, p.authority_end, b"")
            p.authority = None
            return

        text: str = decode(authority)
        parsed: AuthorityDescriptor
        end: int
        parsed, end = parse_authority(text, 0)
        if end != len(text):
            logger.debug("rejected authority %r at offset %d", text, end)
            raise InvalidIri("invalid authority")
        if not check_path(self.path, p.scheme_len is not None, True):
            raise InvalidIri("path cannot follow an authority")

        raw: bytes = text.encode(ENCODING)
        if p.authority is None:
            self._replace(p.scheme_end, p.scheme_end, b"//")
            self._replace(p.scheme_end + 2, p.scheme_end + 2, raw)
        else:
            self._replace(p.authority_offset, p.authority_end, raw)
        p.authority = parsed

    def _require_authority(self: Self) -> AuthorityDescriptor:
        if self._p.authority is None:
            raise InvalidIri("no authority")
        return self._p.authority

    def set_userinfo(self: Self, userinfo: Text | None) -> None:
        authority: AuthorityDescriptor = self._require_authority()
        offset: int = self._p.authority_offset
        if userinfo is None:
            if authority.userinfo_len is not None:
                self._replace(offset, offset + authority.userinfo_len + 1, b"")
                authority.userinfo_len = None
            return

        raw: bytes = _component(userinfo, scan_userinfo, "userinfo")
        if authority.userinfo_len is None:
            self._replace(offset, offset, b"@")
            self._replace(offset, offset, raw)
        else:
            self._replace(offset, offset + authority.userinfo_len, raw)
        authority.userinfo_len = len(raw)

    def set_host(self: Self, host: Text) -> None:
        """Set the host, creating an authority if there is none."""
        text: str = decode(host)
        length: int
        kind: HostKind
        length, kind = scan_host(text, 0)
        if length != len(text):
            logger.debug("rejected host %r", text)
            raise InvalidIri("invalid host")

        authority: AuthorityDescriptor | None = self._p.authority
        if authority is None:
            self.set_authority(text)
            return
        raw: bytes = text.encode(ENCODING)
        offset: int = authority.host_offset(self._p.authority_offset)
        self._replace(offset, offset + authority.host_len, raw)
        authority.host_len = len(raw)
        authority.host_kind = kind

    def set_port(self: Self, port: Text | None) -> None:
        authority: AuthorityDescriptor = self._require_authority()
        offset: int = authority.host_offset(self._p.authority_offset) + authority.host_len
        if port is None:
            if authority.port_len is not None:
                self._replace(offset, offset + authority.port_len + 1, b"")
                authority.port_len = None
            return

        raw: bytes = _component(port, scan_port, "port")
        if authority.port_len is None:
            self._replace(offset, offset, b":")
            self._replace(offset + 1, offset + 1, raw)
        else:
            self._replace(offset + 1, offset + 1 + authority.port_len, raw)
        authority.port_len = len(raw)

    def set_path(self: Self, path: Text) -> None:
        p: Descriptor = self._p
        raw: bytes = _component(path, scan_path, "path")
        if not check_path(raw.decode(ENCODING), p.scheme_len is not None, p.authority is not None):
            raise InvalidIri("path not allowed here")
        self._replace(p.path_offset, p.path_end, raw)
        p.path_len = len(raw)

    def path_mut(self: Self) -> PathMut:
        return PathMut(self)

    def normalize(self: Self) -> None:
        """Remove the dot segments of the path, in place."""
        p: Descriptor = self._p
        raw: bytes = normalize_for(self.path, p.scheme_len is not None, p.authority is not None).encode(ENCODING)
        self._replace(p.path_offset, p.path_end, raw)
        p.path_len = len(raw)

    def set_query(self: Self, query: Text | None) -> None:
        p: Descriptor = self._p
        if query is None:
            if p.query_len is not None:
                self._replace(p.query_offset - 1, p.query_end, b"")
                p.query_len = None
            return

        raw: bytes = _component(query, scan_query, "query")
        if p.query_len is None:
            self._replace(p.path_end, p.path_end, b"?")
            self._replace(p.path_end + 1, p.path_end + 1, raw)
        else:
            self._replace(p.query_offset, p.query_end, raw)
        p.query_len = len(raw)

    def set_fragment(self: Self, fragment: Text | None) -> None:
        p: Descriptor = self._p
        if fragment is None:
            if p.fragment_len is not None:
                self._replace(p.fragment_offset - 1, p.length, b"")
                p.fragment_len = None
            return

        raw: bytes = _component(fragment, scan_fragment, "fragment")
        if p.fragment_len is None:
            self._replace(p.query_end, p.query_end, b"#")
            self._replace(p.query_end + 1, p.query_end + 1, raw)
        else:
            self._replace(p.fragment_offset, p.length, raw)
        p.fragment_len = len(raw)

    def resolve(self: Self, base: Text | _Components) -> None:
        """Resolve this reference against base, in place.

        Everything before the fragment is rewritten in a single splice; the
        fragment itself always survives resolution unchanged.
        """
        base_data, base_p = _base_parts(base)
        prefix, p = resolve_prefix(base_data, base_p, self._data, self._p)
        self._replace(0, self._p.query_end, prefix)
        self._p = p


class IriBuf(IriRefBuf):
    """An owned, editable IRI. Like IriRefBuf, but the scheme is mandatory."""

    __slots__ = ()

    _require_scheme = True

    def __init__(self: Self, data: "Text | _Components") -> None:
        super().__init__(data)


def parse_iri(data: Text) -> Iri:
    """RFC 3987 IRI parser. The text is kept as is, without normalization."""
    return Iri(data)


def parse_iri_reference(data: Text) -> IriRef:
    """RFC 3987 IRI-reference parser: an IRI, or an irelative-ref."""
    return IriRef(data)


def resolve(base: Text | _Components, reference: Text | _Components) -> IriBuf:
    """Resolve reference against base, like urljoin but strictly per RFC 3986 section 5.3."""
    if not isinstance(reference, _Components):
        reference = IriRef(reference)
    return reference.resolved(base)
