"""iriref.resolution
Reference resolution, RFC 3986 section 5.3, strict variant.

The functions here work on a buffer and its Descriptor rather than on the
public types, so the same code serves both the copying `resolved` and the
in-place `resolve`.
"""

import dataclasses

from .parsing import ENCODING, AuthorityDescriptor, Descriptor, InvalidIri
from .path import merge, remove_dot_segments

Buffer = bytes | bytearray


def _path(data: Buffer, p: Descriptor) -> str:
    return bytes(data[p.path_offset : p.path_end]).decode(ENCODING)


def _query(data: Buffer, p: Descriptor) -> bytes | None:
    if p.query_len is None:
        return None
    return bytes(data[p.query_offset : p.query_end])


def _authority(data: Buffer, p: Descriptor) -> tuple[bytes, AuthorityDescriptor] | None:
    if p.authority is None:
        return None
    return bytes(data[p.authority_offset : p.authority_end]), dataclasses.replace(p.authority)


def resolve_prefix(base_data: Buffer, base: Descriptor, ref_data: Buffer, ref: Descriptor) -> tuple[bytes, Descriptor]:
    """Resolve the reference (ref_data, ref) against the base (base_data, base).

    Returns everything of the result that precedes its fragment, and the
    Descriptor of the full result. The fragment is always the reference's
    fragment, unchanged, so callers append it (or keep it) themselves.
    """
    if base.scheme_len is None:
        raise InvalidIri("base IRI has no scheme")

    # This is a direct translation of the pseudocode in RFC 3986 section 5.2.2,
    # without the non-strict clause that ignores a scheme equal to the base's.
    scheme: bytes
    authority: tuple[bytes, AuthorityDescriptor] | None
    path: str
    query: bytes | None
    if ref.scheme_len is not None:
        scheme = bytes(ref_data[: ref.scheme_len])
        authority = _authority(ref_data, ref)
        path = remove_dot_segments(_path(ref_data, ref))
        query = _query(ref_data, ref)
    else:
        if ref.authority is not None:
            authority = _authority(ref_data, ref)
            path = remove_dot_segments(_path(ref_data, ref))
            query = _query(ref_data, ref)
        else:
            ref_path: str = _path(ref_data, ref)
            if len(ref_path) == 0:
                path = _path(base_data, base)
                if ref.query_len is not None:
                    query = _query(ref_data, ref)
                else:
                    query = _query(base_data, base)
            else:
                if ref_path.startswith("/"):
                    path = remove_dot_segments(ref_path)
                else:
                    path = remove_dot_segments(merge(_path(base_data, base), ref_path, base.authority is not None))
                query = _query(ref_data, ref)
            authority = _authority(base_data, base)
        scheme = bytes(base_data[: base.scheme_len])

    if authority is None and path.startswith("//"):
        # Would otherwise be read back as an authority.
        path = "/." + path

    result: Descriptor = Descriptor(scheme_len=len(scheme), fragment_len=ref.fragment_len)
    parts: list[bytes] = [scheme, b":"]
    if authority is not None:
        parts += [b"//", authority[0]]
        result.authority = authority[1]
    raw_path: bytes = path.encode(ENCODING)
    parts.append(raw_path)
    result.path_len = len(raw_path)
    if query is not None:
        parts += [b"?", query]
        result.query_len = len(query)
    return b"".join(parts), result
