# -*- coding: utf-8 -*-
"""Reference resolution.

Implements the reference resolution algorithm of RFC 3986 section 5.2: removal of dot segments, merging of a relative
path with the base path and the choice of which components are taken from the reference and which from the base.

All functions are pure: they only read the given URIs and return newly created values.
"""
from typing import List, Tuple

from .uri import URI

DOT_SEGMENTS = frozenset((".", ".."))


def remove_dot_segments(path: str) -> str:
    """
    Remove the ``.`` and ``..`` segments from a URI path.

    A ``..`` segment removes the previous segment. For an absolute path the root is never removed, so excess ``..``
    segments are discarded (``/a/../../g`` gives ``/g``); for a rootless path they are discarded as well. A path whose
    last segment is a dot segment keeps a trailing slash.

    :param path: The path to normalise.
    :return: The path without dot segments.
    """
    if "." not in path:
        return path

    segments = path.split("/")
    absolute = path.startswith("/")
    output: List[str] = []
    for segment in segments:
        if segment == "..":
            if output and not (absolute and len(output) == 1):
                output.pop()
        elif segment != ".":
            output.append(segment)

    new_path = "/".join(output)
    if segments[-1] in DOT_SEGMENTS:
        new_path += "/"
    return new_path


def resolve_path_and_query(reference: URI, base: URI) -> Tuple[str, str]:
    """
    Compute the target path (before dot segment removal) and query of a reference without scheme or authority.

    :param reference: The reference being resolved.
    :param base: The base URI.
    :return: A tuple of the merged path and the query.
    """
    target_path = reference.path
    target_query = reference.query

    if target_path.startswith("/"):
        return target_path, target_query

    if target_path == "":
        target_path = base.path
        # some base values carry a rootless path next to an authority
        if base.authority and not target_path.startswith("/"):
            target_path = "/" + target_path
        if target_query == "":
            target_query = base.query
        return target_path, target_query

    base_path = base.path
    if base.authority and base_path == "":
        target_path = "/" + target_path

    if base_path:
        directory, _, _ = base_path.rpartition("/")
        target_path = f"{directory}/{target_path}"

    return target_path, target_query


def resolve(reference: URI, base: URI) -> URI:
    """
    Resolve a URI reference against a base URI.

    The result has the type of the reference. The fragment always comes from the reference.

    :param reference: The (possibly relative) reference.
    :param base: The absolute base URI.
    :return: A new resolved URI.
    :raises InvalidComponent: If the type of the reference cannot hold the resolved components.
    """
    if reference.scheme:
        return reference.with_path(remove_dot_segments(reference.path))

    if reference.authority:
        return reference.replace(
            scheme=base.scheme,
            path=remove_dot_segments(reference.path),
        )

    user, sep, password = base.user_info.partition(":")
    path, query = resolve_path_and_query(reference, base)

    return reference.replace(
        scheme=base.scheme,
        user=user,
        password=password if sep else None,
        host=base.host,
        port=base.port,
        path=remove_dot_segments(path),
        query=query,
    )
