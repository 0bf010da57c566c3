"""
File discovery helpers for filekit.

Thin wrappers over directory listing and glob. Glob patterns support
``{a,b}`` alternatives, which the standard glob module does not.
"""

import glob
import os
from typing import List, Tuple, Optional


def _match_group(pattern: str, start: int) -> Optional[Tuple[int, List[int]]]:
    """
    Find the brace closing the group opened at ``start``.

    Returns the closing index and the positions of top-level commas,
    or None if the group is never closed.
    """
    depth = 0
    commas = []
    for i in range(start, len(pattern)):
        ch = pattern[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i, commas
        elif ch == "," and depth == 1:
            commas.append(i)
    return None


def expand_braces(pattern: str) -> List[str]:
    """
    Expand ``{a,b}`` alternatives in a glob pattern.

    Groups may nest. A group without a comma, or an unclosed brace, is kept
    as literal text.

        >>> expand_braces("*{Foo,Bar}.txt")
        ['*Foo.txt', '*Bar.txt']
    """
    start = pattern.find("{")
    while start != -1:
        group = _match_group(pattern, start)
        if group is not None and group[1]:
            end, commas = group
            bounds = [start] + commas + [end]
            alternatives = [pattern[a + 1:b] for a, b in zip(bounds, bounds[1:])]
            prefix, suffix = pattern[:start], pattern[end + 1:]
            return [
                prefix + expanded
                for alternative in alternatives
                for expanded in expand_braces(alternative + suffix)
            ]
        start = pattern.find("{", start + 1)
    return [pattern]


class FileFinder:
    """Prefix and glob queries over the filesystem."""

    def __init__(self, brace_expansion: bool = True):
        """
        Args:
            brace_expansion: Expand {a,b} groups in glob patterns (default: True)
        """
        self.brace_expansion = brace_expansion

    def find_files_that_start_with(self, prefix_path: str) -> List[str]:
        """
        Find directory entries whose name starts with a prefix.

        ``prefix_path`` is split into a directory and a name prefix, e.g.
        ``data/pre`` lists ``data`` for names starting with ``pre``. Results
        are joined back onto the directory as given, so relative input gives
        relative paths.

        Args:
            prefix_path: Directory plus name prefix

        Returns:
            Matching paths sorted by name; empty if the directory is missing
        """
        directory, prefix = os.path.split(os.fspath(prefix_path))
        listing_dir = directory or os.curdir
        if not os.path.isdir(listing_dir):
            return []

        return [
            os.path.join(directory, name)
            for name in sorted(os.listdir(listing_dir))
            if name.startswith(prefix)
        ]

    def find_files_that_match(self, pattern: str) -> List[str]:
        """
        Find paths matching a glob pattern.

        Each brace alternative is globbed in turn; results keep alternative
        order, are sorted within each alternative and appear once.

        Args:
            pattern: Glob pattern, e.g. ``data/*{Foo,Bar}.txt``

        Returns:
            Matching paths (possibly empty)
        """
        pattern = os.fspath(pattern)
        patterns = expand_braces(pattern) if self.brace_expansion else [pattern]

        found = []
        seen = set()
        for expanded in patterns:
            for match in sorted(glob.glob(expanded)):
                if match not in seen:
                    seen.add(match)
                    found.append(match)
        return found
