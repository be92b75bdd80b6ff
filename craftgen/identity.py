"""Identifier generation and the project-wide name index.

Builders never call :mod:`uuid` directly; they draw identifiers from a
``UidGenerator`` handed in by the caller.  ``RandomUidGenerator`` is what a
normal run uses.  ``SeededUidGenerator`` produces the same sequence for the
same seed, which makes generated output reproducible.
"""

from __future__ import annotations

import random
import uuid
from collections.abc import Iterator
from typing import Optional, Protocol


class UidGenerator(Protocol):
    """Source of unique identifiers."""

    def next_uid(self) -> str:
        ...


class RandomUidGenerator:
    """UUID4 identifiers from the operating system's random source."""

    def next_uid(self) -> str:
        return str(uuid.uuid4())


class SeededUidGenerator:
    """Reproducible, version-4 shaped identifiers derived from *seed*."""

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self._rng = random.Random(seed)

    def next_uid(self) -> str:
        return str(uuid.UUID(int=self._rng.getrandbits(128), version=4))


def make_uid_generator(seed: Optional[int] = None) -> UidGenerator:
    """Return a seeded generator when *seed* is given, a random one otherwise."""
    if seed is None:
        return RandomUidGenerator()
    return SeededUidGenerator(seed)


def name_label(name: str, handle: str) -> str:
    """Display label used by the ``__names__`` index: ``"<Name> # <handle>"``."""
    return f"{name} # {handle}"


class IdentityIndex:
    """Insertion-ordered mapping of generated identifier to display label.

    Only the project compiler registers entries.  Each identifier may be
    registered once.
    """

    def __init__(self) -> None:
        self._labels: dict[str, str] = {}

    def register(self, uid: str, name: str, handle: str) -> str:
        if uid in self._labels:
            raise ValueError(f"Identifier already registered: {uid}")
        label = name_label(name, handle)
        self._labels[uid] = label
        return label

    def labels(self) -> dict[str, str]:
        """Return a copy of the index in insertion order."""
        return dict(self._labels)

    def __contains__(self, uid: object) -> bool:
        return uid in self._labels

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[str]:
        return iter(self._labels)
