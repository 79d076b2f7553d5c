"""iriref.path
Path segments and dot-segment removal (RFC 3986 section 5.2.4, errata 4547).

A path is split on "/". A leading "/" makes the path absolute and is not a
segment of its own; a trailing "/" produces a final empty segment, so
"/a/b" has the segments ["a", "b"] and "/a/b/" has ["a", "b", ""].
"""

from typing import Iterable, Iterator, Self


def segments(path: str) -> Iterator[str]:
    """The raw, still percent-encoded segments of path, in order."""
    if len(path) == 0:
        return
    yield from path.removeprefix("/").split("/")


def _remove_dots(raw: Iterable[str], absolute: bool) -> list[str]:
    output: list[str] = []
    raw_segments: list[str] = list(raw)
    for i, segment in enumerate(raw_segments):
        last: bool = i == len(raw_segments) - 1
        if segment == ".":
            if last:
                output.append("")
        elif segment == "..":
            if len(output) > 0 and (absolute or output[-1] != ".."):
                output.pop()
            elif not absolute:
                # Errata 4547: a relative path keeps the ".." it cannot resolve.
                output.append("..")
            if last:
                output.append("")
        else:
            output.append(segment)
    return output


def normalized_segments(path: str) -> list[str]:
    """The segments of path with "." and ".." segments resolved."""
    return _remove_dots(segments(path), path.startswith("/"))


def _render(output: list[str], absolute: bool) -> str:
    if absolute:
        return "/" + "/".join(output)
    if len(output) > 1 and output[0] == "":
        # "a/..//b" must not turn into the absolute path "/b".
        return "./" + "/".join(output)
    return "/".join(output)


def remove_dot_segments(path: str) -> str:
    """Implementation of the "remove_dot_segments" routine from RFC 3986 section 5.2.4

    With errata 4547 applied: ".." segments that would climb above the start
    of a relative path are kept, so "a/b/../../../" becomes "../" and not "".
    Absolute paths drop them, as the RFC specifies: "/a/../../b" becomes "/b".
    """
    absolute: bool = path.startswith("/")
    return _render(_remove_dots(segments(path), absolute), absolute)


def merge(base_path: str, ref_path: str, base_has_authority: bool) -> str:
    """Implementation of the "merge" routine defined in RFC 3986 section 5.2.3"""
    if base_has_authority and len(base_path) == 0:
        return f"/{ref_path}"
    dirname, slash, _ = base_path.rpartition("/")
    return dirname + slash + ref_path


def pop_segment(path: str) -> str:
    """path without its last segment and the "/" separating it.

    A segment ending in "/" counts as one segment, so popping "/a/b/" gives
    "/a". The root of an absolute path is kept: popping "/a" gives "/".
    """
    if path in ("", "/"):
        return path
    body: str = path.removesuffix("/")
    i: int = body.rfind("/")
    if i == 0:
        return "/"
    if i < 0:
        return ""
    return body[:i]


def normalize_for(path: str, has_scheme: bool, has_authority: bool) -> str:
    """Dot-free form of path that still parses as a path in its position.

    Without an authority, "//" cannot start a path and gets a "/." prefix.
    Without scheme and authority, a first segment containing ":" would be
    read as a scheme and gets a "./" prefix.
    """
    result: str = remove_dot_segments(path)
    if not has_authority and result.startswith("//"):
        return "/." + result
    if not has_scheme and not has_authority and ":" in result.partition("/")[0]:
        return "./" + result
    return result


class Path(str):
    """The path of an IRI reference, with segment-level accessors."""

    @property
    def is_absolute(self: Self) -> bool:
        return self.startswith("/")

    @property
    def is_empty(self: Self) -> bool:
        return len(self) == 0

    def segments(self: Self) -> Iterator[str]:
        return segments(self)

    def normalized_segments(self: Self) -> list[str]:
        return normalized_segments(self)

    def normalized(self: Self) -> "Path":
        return Path(remove_dot_segments(self))
