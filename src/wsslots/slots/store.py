"""
Page Store

The page store is the host collaborator that owns revisions. The slot
editing core only talks to the abstract `PageStore` interface, which keeps
it independent of the actual revision storage engine.

`InMemoryPageStore` is a complete, thread-safe stand-in for the host. It is
used by the test suite and by the bundled API application. Besides storing
revisions it runs the host's data-update pipeline after every save: the
primary semantic data of the page is derived from the `main` slot and
handed to every registered data-update hook before it is stored.

Design choices
--------------
- Re-entrant lock around all state, so hooks may read the store while a
  save is in progress.
- Saves that do not change any slot are null edits. They create no revision
  but still refresh derived data.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from threading import RLock
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from ..semantic.data import SemanticData
from ..semantic.extractor import AnnotationExtractor
from .errors import InvalidPageError, PageNotFoundError, RevisionStoreError
from .models import (
    MAIN_SLOT,
    Content,
    EditFlag,
    InvalidTitleError,
    PageIdentity,
    Revision,
    SaveResult,
    normalize_title,
    slots_sha1,
)
from .registry import SlotRoleRegistry
from .updater import PendingEdit

logger = logging.getLogger("wsslots.store")


DataUpdateHook = Callable[[SemanticData], bool]


# ---------------------------------------------------------------------
# Abstract interface
# ---------------------------------------------------------------------

class PageStore(ABC):
    """
    Interface of the host's page and revision storage.
    """

    @abstractmethod
    def resolve_page(
        self,
        title: Optional[str] = None,
        page_id: Optional[int] = None,
    ) -> PageIdentity:
        """
        Resolve a title or page id into a page identity.

        Raises
        ------
        InvalidPageError
            If the title is invalid or no page has the given id.
        """

    @abstractmethod
    def get_current_revision(self, page: PageIdentity) -> Optional[Revision]:
        """Return the latest revision of `page`, or None for new pages."""

    @abstractmethod
    def save(self, edit: PendingEdit, comment: str, flags: EditFlag) -> SaveResult:
        """Persist a pending edit. Called through `PendingEdit.save`."""

    @abstractmethod
    def is_registered_slot(self, role: str) -> bool:
        ...

    @abstractmethod
    def default_model_for(self, role: str, page: PageIdentity) -> str:
        ...

    @abstractmethod
    def register_data_update_hook(self, hook: DataUpdateHook) -> None:
        """Run `hook` on a page's semantic data before every data update completes."""

    def get_page(self, title: str) -> PageIdentity:
        """
        Resolve an existing page by title.

        Raises
        ------
        PageNotFoundError
            If the page does not exist.
        """
        page = self.resolve_page(title=title)
        if not page.exists:
            raise PageNotFoundError(f"Page '{page.title}' does not exist.")
        return page

    def new_pending_edit(self, page: PageIdentity, actor: str) -> PendingEdit:
        return PendingEdit(self, page, actor)

    def make_content(self, text: str, model_id: str) -> Content:
        return Content(model_id=model_id, text=text)


# ---------------------------------------------------------------------
# In-memory implementation
# ---------------------------------------------------------------------

class RecentChange(BaseModel):
    """
    Entry of the recent changes feed.
    """
    title: str
    rev_id: int
    actor: str
    comment: str
    tags: List[str]

    model_config = ConfigDict(frozen=True, extra="forbid")


class InMemoryPageStore(PageStore):
    """
    Process-local page store with revision history and a data-update
    pipeline.
    """

    def __init__(
        self,
        registry: SlotRoleRegistry,
        extractor: Optional[AnnotationExtractor] = None,
    ) -> None:
        self._registry = registry
        self._extractor = extractor or AnnotationExtractor()

        self._lock = RLock()
        self._page_ids: Dict[str, int] = {}
        self._titles: Dict[int, str] = {}
        self._revisions: Dict[int, List[Revision]] = {}
        self._semantic_data: Dict[int, SemanticData] = {}
        self._hooks: List[DataUpdateHook] = []

        self._next_page_id = 1
        self._next_rev_id = 1

        self.recent_changes: List[RecentChange] = []
        self.save_count = 0

    # ------------------------------------------------------------------
    # Slot roles
    # ------------------------------------------------------------------

    @property
    def registry(self) -> SlotRoleRegistry:
        return self._registry

    def is_registered_slot(self, role: str) -> bool:
        return self._registry.is_defined_role(role)

    def default_model_for(self, role: str, page: PageIdentity) -> str:
        return self._registry.get_role_handler(role).get_default_model(page)

    # ------------------------------------------------------------------
    # Pages and revisions
    # ------------------------------------------------------------------

    def resolve_page(
        self,
        title: Optional[str] = None,
        page_id: Optional[int] = None,
    ) -> PageIdentity:
        with self._lock:
            if page_id is not None:
                if page_id not in self._titles:
                    raise InvalidPageError(f"There is no page with ID {page_id}.")
                return PageIdentity(title=self._titles[page_id], page_id=page_id)

            if title is None:
                raise InvalidPageError("Either a title or a page ID is required.")

            try:
                normalized = normalize_title(title)
            except InvalidTitleError as exc:
                raise InvalidPageError(f"Bad title \"{title}\".") from exc

            return PageIdentity(title=normalized, page_id=self._page_ids.get(normalized))

    def get_current_revision(self, page: PageIdentity) -> Optional[Revision]:
        with self._lock:
            page_id = self._page_ids.get(page.title)
            if page_id is None:
                return None
            # Callers get copies; stored history stays untouched
            return self._revisions[page_id][-1].model_copy(deep=True)

    def get_revisions(self, page: PageIdentity) -> List[Revision]:
        with self._lock:
            page_id = self._page_ids.get(page.title)
            if page_id is None:
                return []
            return [revision.model_copy(deep=True) for revision in self._revisions[page_id]]

    def delete_page(self, page: PageIdentity) -> None:
        with self._lock:
            page_id = self._page_ids.pop(page.title, None)
            if page_id is None:
                raise PageNotFoundError(f"Page '{page.title}' does not exist.")
            del self._titles[page_id]
            del self._revisions[page_id]
            self._semantic_data.pop(page_id, None)

        logger.info("Deleted page %s", page.title)

    # ------------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------------

    def save(self, edit: PendingEdit, comment: str, flags: EditFlag) -> SaveResult:
        with self._lock:
            self.save_count += 1

            current = self.get_current_revision(edit.page)
            slots: Dict[str, Content] = dict(current.slots) if current else {}
            slots.update(edit.slots_to_set)
            for role in edit.slots_to_remove:
                if role == MAIN_SLOT:
                    raise RevisionStoreError("The main slot cannot be removed.")
                slots.pop(role, None)

            if MAIN_SLOT not in slots:
                raise RevisionStoreError(
                    f"Cannot create page '{edit.page.title}' without a main slot."
                )

            if current is not None and slots_sha1(slots) == current.sha1:
                logger.debug("Null edit on %s", edit.page.title)
                result = SaveResult(revision=current, unchanged=True)
            else:
                result = self._insert_revision(edit, current, slots, comment, flags)

            page_id = self._page_ids[edit.page.title]

        self._run_data_updates(page_id)
        return result

    def _insert_revision(
        self,
        edit: PendingEdit,
        current: Optional[Revision],
        slots: Dict[str, Content],
        comment: str,
        flags: EditFlag,
    ) -> SaveResult:
        title = edit.page.title
        created = current is None

        if created:
            page_id = self._next_page_id
            self._next_page_id += 1
            self._page_ids[title] = page_id
            self._titles[page_id] = title
            self._revisions[page_id] = []
        else:
            page_id = current.page_id

        revision = Revision(
            rev_id=self._next_rev_id,
            page_id=page_id,
            title=title,
            slots=slots,
            parent_id=current.rev_id if current else None,
            actor=edit.actor,
            comment=comment,
            flags=int(flags),
            tags=tuple(edit.tags),
        )
        self._next_rev_id += 1
        self._revisions[page_id].append(revision)

        if not flags & EditFlag.SUPPRESS_RC:
            self.recent_changes.append(
                RecentChange(
                    title=title,
                    rev_id=revision.rev_id,
                    actor=edit.actor,
                    comment=comment,
                    tags=list(edit.tags),
                )
            )

        logger.debug(
            "Saved revision %d of %s with slots %s",
            revision.rev_id,
            title,
            revision.slot_roles,
        )
        return SaveResult(revision=revision.model_copy(deep=True), created=created)

    # ------------------------------------------------------------------
    # Derived data
    # ------------------------------------------------------------------

    def register_data_update_hook(self, hook: DataUpdateHook) -> None:
        with self._lock:
            self._hooks.append(hook)

    def get_semantic_data(self, page: PageIdentity) -> Optional[SemanticData]:
        with self._lock:
            page_id = self._page_ids.get(page.title)
            if page_id is None:
                return None
            return self._semantic_data.get(page_id)

    def _run_data_updates(self, page_id: int) -> None:
        with self._lock:
            if page_id not in self._titles:
                # Deleted after the save released the lock
                return
            title = self._titles[page_id]
            revision = self._revisions[page_id][-1]
            hooks = list(self._hooks)

        page = PageIdentity(title=title, page_id=page_id)
        data = SemanticData(title)

        main_content = revision.get_content(MAIN_SLOT)
        if main_content is not None:
            main_data = self._extractor.extract(main_content, page, revision.rev_id)
            if main_data is not None:
                data.import_data_from(main_data)

        for hook in hooks:
            if not hook(data):
                logger.info("Data update for %s aborted by hook", title)
                return

        with self._lock:
            if page_id in self._titles:
                self._semantic_data[page_id] = data
