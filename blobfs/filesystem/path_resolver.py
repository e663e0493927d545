"""
Path Resolver Module

Parsing and formatting of '/'-delimited paths. Names are opaque:
'.' and '..' are ordinary names, not navigation.

Version: 1.0.0
"""

from dataclasses import dataclass
from typing import List, Sequence


DELIMITER = '/'
ROOT_SENTINEL = 'ROOT'


@dataclass
class ParsedPath:
    """A parsed path with its components."""
    is_absolute: bool
    components: List[str]

    @property
    def is_empty(self) -> bool:
        return not self.components

    def __str__(self) -> str:
        joined = DELIMITER.join(self.components)
        return DELIMITER + joined if self.is_absolute else joined


class PathResolver:
    """
    Splits and joins filesystem paths.

    Empty components (from '//' or a trailing '/') are dropped,
    so 'docs/' and 'docs' parse the same way.
    """

    @staticmethod
    def parse(path: str) -> ParsedPath:
        """
        Parse a path into components.

        Example:
            >>> PathResolver.parse('/docs//a.txt')
            ParsedPath(is_absolute=True, components=['docs', 'a.txt'])
        """
        return ParsedPath(
            is_absolute=PathResolver.is_absolute(path),
            components=[c for c in path.split(DELIMITER) if c],
        )

    @staticmethod
    def format(names: Sequence[str]) -> str:
        """
        Build an absolute path from the names below the root.

        An empty sequence yields the root sentinel.
        """
        if not names:
            return ROOT_SENTINEL
        return DELIMITER + DELIMITER.join(names)

    @staticmethod
    def is_absolute(path: str) -> bool:
        """Check if a path is absolute."""
        return path.startswith(DELIMITER)

    @staticmethod
    def is_root_sentinel(path: str) -> bool:
        """Check if a path is the sentinel pointer_path() returns for the root."""
        return path == ROOT_SENTINEL
