"""iriref.comparison
Equivalence of IRI references beyond byte equality.

Two references are equivalent when they are equal once percent-encoded
characters are decoded and dot segments are removed from their paths.
Nothing scheme-specific is applied: "http://example.org" and
"http://example.org:80" are different, and so are "/foo/bar" and "/foo/bar/".
"""

from urllib.parse import unquote_to_bytes

from .path import normalized_segments


def pct_equal(a: str | None, b: str | None) -> bool:
    """Compare two component values with percent-encoded triplets decoded.

    None (an absent component) is never equal to "" (an empty one).
    """
    if a is None or b is None:
        return a is None and b is None
    if a == b:
        return True
    return unquote_to_bytes(a) == unquote_to_bytes(b)


def equivalent(a, b) -> bool:
    """True if the IRI references a and b identify the same resource.

    The scheme and port are compared byte for byte. Userinfo, host, query,
    fragment and every path segment are compared with percent-encodings
    decoded, and paths are compared after dot-segment removal.
    """
    if a.scheme != b.scheme:
        return False

    a_authority = a.authority
    b_authority = b.authority
    if a_authority is None or b_authority is None:
        if a_authority is not b_authority:
            return False
    elif not (
        pct_equal(a_authority.userinfo, b_authority.userinfo)
        and pct_equal(a_authority.host, b_authority.host)
        and a_authority.port == b_authority.port
    ):
        return False

    if a.path.is_absolute != b.path.is_absolute:
        return False
    a_segments: list[str] = normalized_segments(a.path)
    b_segments: list[str] = normalized_segments(b.path)
    if len(a_segments) != len(b_segments):
        return False
    if not all(pct_equal(x, y) for x, y in zip(a_segments, b_segments)):
        return False

    return pct_equal(a.query, b.query) and pct_equal(a.fragment, b.fragment)
