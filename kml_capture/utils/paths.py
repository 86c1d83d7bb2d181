"""Pipeline path helpers.

Pipeline paths are server-assigned, ``/``-separated locations such as
``pipeline/2024/06/ch-12/entry.json``.  The client only ever splits them:
the last segment is the display name, everything before it is the
containing folder.
"""

from __future__ import annotations

PATH_SEPARATOR = "/"


def parent_path(path: str) -> str:
    """Drop the last segment of *path*.

    ``"a/b/c"`` → ``"a/b"``, ``"a"`` → ``""``, ``""`` → ``""``.
    A leading separator is preserved: ``"/pipeline/x"`` → ``"/pipeline"``.
    """
    return PATH_SEPARATOR.join(path.split(PATH_SEPARATOR)[:-1])


def leaf_name(path: str) -> str:
    """Return the last segment of *path* (``""`` for an empty path)."""
    return path.split(PATH_SEPARATOR)[-1]
