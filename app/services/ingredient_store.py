"""In-memory ingredient list of the current kitchen session."""

import logging
from typing import Iterable, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)


class IngredientStore:
    """
    Ordered set of ingredient names.

    Uniqueness is exact and case-sensitive; entries keep the order in which
    they were first added. Nothing here is persisted.
    """

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._items: List[str] = []
        self.add_many(names)

    @property
    def items(self) -> Tuple[str, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._items))

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def add(self, name: str) -> bool:
        """Append a trimmed name; returns False when it is empty or already present."""
        name = name.strip()
        if not name or name in self._items:
            return False
        self._items.append(name)
        return True

    def add_many(self, names: Iterable[str]) -> List[str]:
        """
        Merge a batch, e.g. the result of image recognition.

        Names already in the store are skipped, and duplicates inside the batch
        collapse to their first occurrence. Returns the names actually added.
        """
        added = [name.strip() for name in names if self.add(name)]
        if added:
            logger.debug("Merged %d new ingredients", len(added))
        return added

    def remove(self, index: int) -> Optional[str]:
        """
        Remove the entry at a position; later entries shift down.

        A stale or out-of-range index is a silent no-op and returns None.
        """
        if 0 <= index < len(self._items):
            return self._items.pop(index)
        return None

    def discard(self, name: str) -> bool:
        """Remove by the name itself, which stays valid across re-renders."""
        try:
            self._items.remove(name)
        except ValueError:
            return False
        return True

    def clear(self) -> None:
        self._items.clear()
