"""Encode filesystem paths as Claude project directory names and back.

Claude stores each project's sessions under ``~/.claude/projects/<token>``
where ``<token>`` is the project path with every ``/`` replaced by ``-``.
The flattening is lossy: ``/home/u/jwst-cosmos`` and ``/home/u/jwst/cosmos``
both encode to ``-home-u-jwst-cosmos``. Decoding therefore probes the live
filesystem and picks the first candidate that exists.

The candidate space is ``2 ** n`` for ``n`` interior markers. Candidates are
generated lazily, most separators first, and the search stops at the first
existing path, so the usual case (nothing ambiguous on disk, or a hit on the
naive decoding) costs a single ``exists()`` call. A token with many interior
markers and no matching path on disk walks the whole space before falling
back; keep that in mind for very deep paths.
"""
from __future__ import annotations

from collections.abc import Callable, Iterator
from itertools import combinations
from pathlib import Path

SEPARATOR = "/"
MARKER = "-"


def encode_project_path(path: str | Path) -> str:
    """``/home/u/Projects/jwst-cosmos`` -> ``-home-u-Projects-jwst-cosmos``."""
    return str(path).replace(SEPARATOR, MARKER)


def _marker_positions(token: str) -> list[int]:
    # Index 0 is always the root separator, never a literal marker.
    return [i for i, ch in enumerate(token) if ch == MARKER and i > 0]


def _render(token: str, convert: frozenset[int]) -> str:
    chars = []
    for i, ch in enumerate(token):
        if ch == MARKER and (i == 0 or i in convert):
            chars.append(SEPARATOR)
        else:
            chars.append(ch)
    return "".join(chars)


def iter_candidate_paths(token: str) -> Iterator[str]:
    """Yield every decoding of ``token``, most separators first.

    Within one separator count the subsets come in ``itertools.combinations``
    order, i.e. lexicographic over marker positions.
    """
    positions = _marker_positions(token)
    for count in range(len(positions), -1, -1):
        for chosen in combinations(positions, count):
            yield _render(token, frozenset(chosen))


def decode_project_path(
    token: str,
    exists: Callable[[str], bool] | None = None,
) -> str:
    """Decode a project token, preferring a candidate that exists on disk.

    Falls back to converting every marker to a separator when no candidate
    exists. ``exists`` defaults to ``os.path.exists`` semantics via pathlib.
    """
    if not token:
        return ""
    probe = exists or (lambda candidate: Path(candidate).exists())
    for candidate in iter_candidate_paths(token):
        if probe(candidate):
            return candidate
    return token.replace(MARKER, SEPARATOR)


def display_name_for(decoded_path: str) -> str:
    """Last path component, or the whole path when there is none."""
    name = decoded_path.rstrip(SEPARATOR).rsplit(SEPARATOR, 1)[-1]
    return name or decoded_path
