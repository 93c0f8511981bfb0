"""
Semantic Slot Merging

Hook into the page data-update pipeline that folds the semantic data of
configured "semantic slots" into the page's primary semantic data.

Slots are processed in configuration order. For every built-in property a
slot declares, the property is first removed from the primary data so that
built-ins are replaced rather than accumulated; user-defined properties are
unioned. A later slot therefore overrides built-ins contributed by an
earlier one.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..config import Settings
from ..slots.errors import InvalidPageError, RevisionStoreError
from ..slots.store import PageStore
from .data import SemanticData
from .extractor import AnnotationExtractor

logger = logging.getLogger("wsslots.semantic")


class SemanticMergeAdapter:
    """
    Merges per-slot semantic data into the page's primary semantic data.
    """

    def __init__(
        self,
        store: PageStore,
        settings: Settings,
        extractor: Optional[AnnotationExtractor] = None,
    ) -> None:
        self._store = store
        self._semantic_slots = list(settings.semantic_slots)
        self._extractor = extractor or AnnotationExtractor()

    def register(self) -> None:
        self._store.register_data_update_hook(self.before_data_update_complete)

    def before_data_update_complete(self, semantic_data: SemanticData) -> bool:
        """
        Extend `semantic_data` before the host stores it.

        Returns
        -------
        bool
            Always True; the data update is never aborted.
        """
        if not semantic_data.subject:
            return True

        try:
            page = self._store.get_page(semantic_data.subject)
        except (InvalidPageError, RevisionStoreError) as exc:
            logger.debug(
                "Skipping semantic slot merge for %s: %s",
                semantic_data.subject,
                exc,
            )
            return True

        revision = self._store.get_current_revision(page)
        if revision is None:
            return True

        for slot in self._semantic_slots:
            if not revision.has_slot(slot):
                continue

            content = revision.get_content(slot)
            if content is None:
                continue

            slot_data = self._extractor.extract(content, page, revision.rev_id)
            if slot_data is None:
                continue

            # Built-in properties present in both sets are replaced, not merged
            for prop in slot_data.get_properties():
                if not prop.is_user_defined:
                    semantic_data.remove_property(prop)

            semantic_data.import_data_from(slot_data)

            logger.debug("Merged semantic data of slot %s into %s", slot, page.title)

        return True
