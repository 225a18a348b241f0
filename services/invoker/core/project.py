"""
Where: services/invoker/core/project.py
What: Project root and source-root discovery for handler lookup.
Why: Handler identifiers are relative to a source root, not to the working directory.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Sequence

from ..config import config


@dataclass(frozen=True)
class Project:
    root: Path
    source_roots: tuple = ()
    excludes: tuple = field(default_factory=lambda: tuple(config.HANDLER_SEARCH_EXCLUDES))

    @classmethod
    def at(cls, root, source_roots: Optional[Sequence] = None) -> "Project":
        root = Path(root).resolve()
        roots = tuple(Path(root, r).resolve() for r in (source_roots or []))
        return cls(root=root, source_roots=roots)

    def roots(self) -> tuple:
        """Configured source roots followed by the project root, without duplicates."""
        return tuple(dict.fromkeys(self.source_roots + (self.root,)))

    def iter_files(self, suffix: str) -> Iterator[Path]:
        """
        Yield files with the given suffix under every root in a stable order.

        Source roots may live outside the project root; a file reachable from
        several roots is yielded once, from the first root that reaches it.
        """
        seen = set()
        for root in self.roots():
            for dirpath, dirnames, filenames in os.walk(root):
                dirnames[:] = sorted(d for d in dirnames if d not in self.excludes)
                for filename in sorted(filenames):
                    path = Path(dirpath) / filename
                    if filename.endswith(suffix) and path not in seen:
                        seen.add(path)
                        yield path
