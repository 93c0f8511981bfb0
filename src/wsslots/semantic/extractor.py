"""
Annotation Extractor

Derives a `SemanticData` set from textual slot content by reading inline
annotations:

- ``[[Property::Value]]`` and ``[[Property::Value|label]]``
- ``[[Category:Name]]``
- ``{{DEFAULTSORT:Key}}``
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from ..slots.models import Content, PageIdentity
from .data import CATEGORY_PROPERTY, SORTKEY_PROPERTY, DIProperty, SemanticData

logger = logging.getLogger("wsslots.semantic")


_ANNOTATION_RE = re.compile(r"\[\[\s*([^\[\]|:]+?)\s*::\s*([^\[\]|]*?)\s*(?:\|[^\[\]]*)?\]\]")
_CATEGORY_RE = re.compile(r"\[\[\s*Category\s*:\s*([^\[\]|]+?)\s*(?:\|[^\[\]]*)?\]\]", re.IGNORECASE)
_DEFAULTSORT_RE = re.compile(r"\{\{\s*DEFAULTSORT\s*:\s*([^{}]*?)\s*\}\}")


class AnnotationExtractor:
    """
    Stateless parser turning slot content into semantic data.
    """

    def extract(
        self,
        content: Content,
        page: PageIdentity,
        rev_id: Optional[int] = None,
    ) -> Optional[SemanticData]:
        """
        Returns
        -------
        Optional[SemanticData]
            The annotations found in `content`, or None when the content is
            not textual or carries no annotations.
        """
        if not content.is_textual:
            return None

        data = SemanticData(page.title)
        text = content.serialize()

        for label, value in _ANNOTATION_RE.findall(text):
            if not label.strip():
                continue
            data.add_property_value(DIProperty.from_label(label), value)

        category = DIProperty(key=CATEGORY_PROPERTY)
        for name in _CATEGORY_RE.findall(text):
            data.add_property_value(category, name.replace("_", " "))

        sortkeys = _DEFAULTSORT_RE.findall(text)
        if sortkeys:
            # The last DEFAULTSORT on a page wins
            data.add_property_value(DIProperty(key=SORTKEY_PROPERTY), sortkeys[-1])

        if data.is_empty():
            return None

        logger.debug(
            "Extracted %d properties from %s (rev %s)",
            len(data.get_properties()),
            page.title,
            rev_id,
        )
        return data
