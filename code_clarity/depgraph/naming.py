"""Short, collision-free display names for file nodes."""

from __future__ import annotations

import os
from collections import defaultdict
from collections.abc import Iterable


def _segments(path: str) -> list[str]:
    return [part for part in path.replace(os.sep, "/").split("/") if part]


def _suffix(segments: list[str], depth: int) -> str:
    return "/".join(segments[-depth:])


def build_node_names(paths: Iterable[str]) -> dict[str, str]:
    """Map each path to its base name, or the shortest shared suffix that
    tells colliding base names apart.

    All members of a colliding group get a suffix of the same depth, e.g.
    ``support/utils.js`` and ``lib/utils.js`` rather than ``utils.js`` for one
    of them.
    """
    unique = list(dict.fromkeys(paths))

    groups: dict[str, list[str]] = defaultdict(list)
    for path in unique:
        groups[os.path.basename(path)].append(path)

    names: dict[str, str] = {}
    for base, members in groups.items():
        if len(members) == 1:
            names[members[0]] = base
            continue

        segments = {path: _segments(path) for path in members}
        max_depth = max(len(s) for s in segments.values())
        depth = 2
        while depth < max_depth:
            suffixes = {_suffix(segments[path], depth) for path in members}
            if len(suffixes) == len(members):
                break
            depth += 1

        for path in members:
            names[path] = _suffix(segments[path], depth)

    return names
