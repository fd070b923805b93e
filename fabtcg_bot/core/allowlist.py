"""Allowlist of Telegram user ids permitted to talk to the bot."""

from bisect import bisect_left
from collections.abc import Iterable


class Allowlist:
    """Immutable, sorted set of principal ids.

    An empty allowlist permits everyone. Membership is a binary search over
    the sorted ids.

    Example:
        >>> allowlist = Allowlist([42, 7])
        >>> allowlist.is_allowed(7)
        True
        >>> Allowlist().is_allowed(1234)
        True
    """

    __slots__ = ("_ids",)

    def __init__(self, ids: Iterable[int] = ()) -> None:
        self._ids: tuple[int, ...] = tuple(sorted(set(ids)))

    def with_ids(self, *ids: int) -> "Allowlist":
        """Return a new allowlist extended by ``ids``."""
        return Allowlist((*self._ids, *ids))

    @property
    def ids(self) -> tuple[int, ...]:
        """The sorted ids on the list."""
        return self._ids

    def is_allowed(self, user_id: int) -> bool:
        """Check whether ``user_id`` may use the bot.

        Returns True if the allowlist is empty or the id is on it.
        """
        if not self._ids:
            return True
        i = bisect_left(self._ids, user_id)
        return i < len(self._ids) and self._ids[i] == user_id

    def __len__(self) -> int:
        return len(self._ids)

    def __repr__(self) -> str:
        return f"Allowlist({list(self._ids)!r})"
