"""
Slot Edit Orchestration

This module implements the slot editing workflow: it validates a slot edit
request, computes the final content of the slot, decides whether the slot
is set or removed and commits the change through the page store.

Responsibilities
----------------
- Validate the page and the slot role
- Append to or replace the existing slot text
- Remove non-main slots that end up empty
- Bootstrap an empty `main` slot when a page is created through another slot
- Tag non-main edits and honour the watchlist mode
- Optionally run a null edit afterwards so derived data is recomputed

Expected failures are raised as `SlotEditError` subclasses. Errors coming
from the page store are not translated.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..config import Settings
from .errors import AppendNotSupportedError, InvalidPageError, UnknownSlotError
from .models import MAIN_SLOT, SLOT_EDIT_TAG, Content, EditFlag, PageIdentity, SaveResult
from .store import PageStore

logger = logging.getLogger("wsslots.editor")


WATCHLIST_NOCHANGE = "nochange"


class SlotEditOrchestrator:
    """
    Edits single slots of wiki pages.
    """

    def __init__(self, store: PageStore, settings: Settings) -> None:
        """
        Parameters
        ----------
        store : PageStore
            Host page store holding revisions and slot roles.

        settings : Settings
            Configuration; only `do_purge` is read here.
        """
        self._store = store
        self._settings = settings

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def edit_slot(
        self,
        actor: str,
        page: Optional[PageIdentity],
        text: str,
        slot_name: str,
        summary: str = "",
        append: bool = False,
        watchlist: str = "",
    ) -> SaveResult:
        """
        Edit a single slot of a page.

        Parameters
        ----------
        actor : str
            Name of the user performing the edit.

        page : Optional[PageIdentity]
            The page to edit. May be a page that does not exist yet.

        text : str
            Text to insert, or to append when `append` is set.

        slot_name : str
            Role of the slot to edit.

        summary : str
            Edit summary.

        append : bool
            Append `text` to the current slot text instead of replacing it.

        watchlist : str
            "nochange" suppresses recent changes and watchlist notifications.

        Returns
        -------
        SaveResult
            Result of the primary save.

        Raises
        ------
        InvalidPageError
            If `page` is missing or has no title.

        UnknownSlotError
            If `slot_name` is not a registered slot role.

        AppendNotSupportedError
            If appending to a slot with non-textual content.
        """
        if page is None or not page.title:
            logger.critical("The page given to edit_slot is not valid, since it does not contain a title")
            raise InvalidPageError()

        context = {"slot_name": slot_name, "page": page.title}

        logger.debug("Editing slot %s on page %s", slot_name, page.title, extra=context)

        old_revision = self._store.get_current_revision(page)
        pending = self._store.new_pending_edit(page, actor)

        if not self._store.is_registered_slot(slot_name):
            logger.critical(
                "Tried to edit non-existent slot %s on page %s",
                slot_name,
                page.title,
                extra=context,
            )
            raise UnknownSlotError(slot_name)

        if append:
            content = self.get_slot_content(page, slot_name)

            if content is not None:
                if not content.is_textual:
                    logger.critical(
                        "Tried to append to slot %s with non-textual content model %s while editing page %s",
                        slot_name,
                        content.model_id,
                        page.title,
                        extra={**context, "model_id": content.model_id},
                    )
                    raise AppendNotSupportedError(content.model_id)

                text = content.serialize() + text

        if text == "" and slot_name != MAIN_SLOT:
            logger.debug("Removing slot %s since it is empty", slot_name, extra=context)
            pending.remove_slot(slot_name)
        else:
            if old_revision is not None and old_revision.has_slot(slot_name):
                model_id = old_revision.get_content(slot_name).model_id
            else:
                model_id = self._store.default_model_for(slot_name, page)

            logger.debug("Setting content of slot %s with model %s", slot_name, model_id, extra=context)
            pending.set_content(slot_name, self._store.make_content(text, model_id))

        if old_revision is None and slot_name != MAIN_SLOT:
            # A revision must always carry a main slot
            logger.debug('Setting empty "main" slot', extra=context)
            pending.set_content(
                MAIN_SLOT,
                self._store.make_content("", self._store.default_model_for(MAIN_SLOT, page)),
            )

        if slot_name != MAIN_SLOT:
            pending.add_tag(SLOT_EDIT_TAG)

        flags = EditFlag.INTERNAL
        if watchlist == WATCHLIST_NOCHANGE:
            flags |= EditFlag.SUPPRESS_RC

        logger.debug("Saving revision", extra=context)
        result = pending.save(summary, flags)
        logger.debug("Finished saving revision", extra=context)

        if not pending.is_unchanged():
            logger.debug("Refreshing data for page %s", page.title, extra=context)
            self._refresh_data(page, actor)

        return result

    def get_slot_content(self, page: PageIdentity, slot_name: str) -> Optional[Content]:
        """
        Return the content of `slot_name` on the current revision of `page`,
        or None if the page or the slot does not exist.
        """
        revision = self._store.get_current_revision(page)

        if revision is None:
            return None

        return revision.get_content(slot_name)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _refresh_data(self, page: PageIdentity, actor: str) -> None:
        if not self._settings.do_purge:
            return

        # Null edit so every page property is recomputed
        pending = self._store.new_pending_edit(page, actor)
        pending.save("", EditFlag.SUPPRESS_RC | EditFlag.AUTOSUMMARY)
