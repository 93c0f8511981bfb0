"""
Pending Edit Builder

A `PendingEdit` collects the slot changes of one save operation. It is
created by a `PageStore`, filled by the caller and committed exactly once.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Set

from .models import Content, EditFlag, PageIdentity, SaveResult

if TYPE_CHECKING:
    from .store import PageStore


class PendingEdit:
    """
    Mutable builder scoped to a single save.
    """

    def __init__(self, store: "PageStore", page: PageIdentity, actor: str) -> None:
        self._store = store
        self.page = page
        self.actor = actor

        self.slots_to_set: Dict[str, Content] = {}
        self.slots_to_remove: Set[str] = set()
        self.tags: List[str] = []

        self._result: SaveResult | None = None
        self._saved = False

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def set_content(self, role: str, content: Content) -> None:
        self.slots_to_remove.discard(role)
        self.slots_to_set[role] = content

    def remove_slot(self, role: str) -> None:
        self.slots_to_set.pop(role, None)
        self.slots_to_remove.add(role)

    def add_tag(self, tag: str) -> None:
        if tag not in self.tags:
            self.tags.append(tag)

    def has_modifications(self) -> bool:
        return bool(self.slots_to_set or self.slots_to_remove)

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------

    @property
    def committed(self) -> bool:
        return self._result is not None

    def save(self, comment: str, flags: EditFlag = EditFlag.NONE) -> SaveResult:
        """
        Commit the collected changes through the owning store.

        Raises
        ------
        RuntimeError
            If save was already called, whether or not it succeeded.
        """
        if self._saved:
            raise RuntimeError("PendingEdit has already been saved.")

        # Spent even when the store raises
        self._saved = True
        self._result = self._store.save(self, comment, flags)
        return self._result

    def is_unchanged(self) -> bool:
        if self._result is None:
            raise RuntimeError("PendingEdit has not been saved yet.")
        return self._result.unchanged
