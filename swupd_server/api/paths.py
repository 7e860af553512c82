"""URL path canonicalization shared by the file server and the metrics layer."""

import posixpath


def canonicalize_path(path: str) -> str:
    """Return ``path`` rooted at ``/`` with ``.``, ``..`` and repeated separators collapsed.

    Idempotent: ``canonicalize_path(canonicalize_path(p)) == canonicalize_path(p)``.
    ``..`` never climbs above the root and trailing separators are dropped.
    """
    if not path.startswith("/"):
        path = "/" + path
    cleaned = posixpath.normpath(path)
    # POSIX keeps exactly two leading slashes; URLs have no such meaning.
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned
