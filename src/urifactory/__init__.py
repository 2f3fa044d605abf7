# -*- coding: utf-8 -*-
"""urifactory.

urifactory builds URI values from strings, resolving relative references against a base URI as described in RFC 3986
section 5.

The package comes in three parts:
    * The URI value types and parser (``urifactory.uri``), one type per family of schemes.
    * The reference resolver (``urifactory.resolver``) which implements dot segment removal and path merging.
    * The factory (``urifactory.factory``) which picks a URI type from the scheme and resolves against a base.
"""

from importlib.metadata import version, PackageNotFoundError
from typing import Tuple, cast

try:
    __version__: str = version("urifactory")
except PackageNotFoundError:
    # When running from a source tree that has not been installed
    __version__: str = "0.0.0"
__version_info__: Tuple[str, str, str] = cast(Tuple[str, str, str], tuple(__version__.split('.')))

from .uri import URI, Http, Ftp, Ws, Data, File, UriError, MalformedURI, InvalidComponent, parse  # noqa: E402
from .factory import (Factory, SchemeRegistry, InvalidBaseURI, InvalidScheme, InvalidTargetType,  # noqa: E402
                      create)
from .resolver import resolve, remove_dot_segments  # noqa: E402

__all__ = [
    "URI",
    "Http",
    "Ftp",
    "Ws",
    "Data",
    "File",
    "UriError",
    "MalformedURI",
    "InvalidComponent",
    "InvalidBaseURI",
    "InvalidScheme",
    "InvalidTargetType",
    "Factory",
    "SchemeRegistry",
    "create",
    "parse",
    "resolve",
    "remove_dot_segments",
]
