"""Per-world monotonic id allocation."""

from __future__ import annotations


class IdAllocator:
    """Monotonic integer ids, one counter per entity kind.

    Owned by a single simulation instance so separate worlds never share
    counters.
    """

    def __init__(self) -> None:
        self._counters: dict[str, int] = {}

    def next(self, kind: str) -> int:
        nid = self._counters.get(kind, 0)
        self._counters[kind] = nid + 1
        return nid

    def next_tag(self, kind: str) -> str:
        """String id such as ``"apple-3"`` for collectibles."""
        return f"{kind}-{self.next(kind)}"

    def reset(self) -> None:
        self._counters.clear()
