"""Session-scoped deterministic id generation."""

import itertools


class IdSequence:
    """Monotonic counter producing ids like ``item_1``, ``npc_2``.

    One sequence per session keeps generated ids unique within the
    session and reproducible across runs.
    """

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)

    def next(self, prefix: str) -> str:
        return f"{prefix}_{next(self._counter)}"
