"""
Recent-search history for one orchestrator.
"""

from collections import deque

from spellseeker.config import settings


class SearchHistory:
    """
    Bounded list of recent natural-language searches, most recent first.

    Queries are deduplicated case-insensitively; re-adding a query moves
    it to the front with its latest spelling.
    """

    def __init__(self, max_items: int = settings.max_history_items) -> None:
        self.max_items = max_items
        self._items: deque[str] = deque(maxlen=max_items)

    def add(self, query: str) -> None:
        query = query.strip()
        if not query:
            return
        self.remove(query)
        self._items.appendleft(query)

    def remove(self, query: str) -> bool:
        """Remove a query regardless of case. Returns True if it was present."""
        folded = query.strip().casefold()
        for item in self._items:
            if item.casefold() == folded:
                self._items.remove(item)
                return True
        return False

    def clear(self) -> None:
        self._items.clear()

    def items(self) -> list[str]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, query: object) -> bool:
        if not isinstance(query, str):
            return False
        folded = query.strip().casefold()
        return any(item.casefold() == folded for item in self._items)
