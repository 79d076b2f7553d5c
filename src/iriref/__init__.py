"""iriref
Internationalized Resource Identifiers (RFC 3987) and IRI references (RFC 3986)

Parsing keeps the text exactly as given and only records where each component
starts and ends. Owned values are edited in place, references are resolved
with the strict algorithm of RFC 3986 section 5.3, and dot segments are
removed following errata 4547.
"""

import logging

from .comparison import equivalent
from .grammar import HostKind
from .parsing import InvalidIri
from .path import Path, remove_dot_segments
from .reference import Authority, Iri, IriBuf, IriRef, IriRefBuf, PathMut, parse_iri, parse_iri_reference, resolve

__version__ = "0.1"

__all__ = [
    "Authority",
    "HostKind",
    "InvalidIri",
    "Iri",
    "IriBuf",
    "IriRef",
    "IriRefBuf",
    "Path",
    "PathMut",
    "equivalent",
    "parse_iri",
    "parse_iri_reference",
    "remove_dot_segments",
    "resolve",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
