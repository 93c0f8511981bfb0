"""
Slot Domain Models

This module defines the value types shared by the slot editing core:
page identities, slot content, immutable revisions and save results.

Design Goals
------------
- Revisions are immutable once created
- Content hashing is deterministic so unchanged saves can be detected
- Title normalisation lives in one place
"""

from __future__ import annotations

import hashlib
import re
from datetime import datetime, timezone
from enum import IntFlag
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------

MAIN_SLOT = "main"

SLOT_EDIT_TAG = "wsslots-slot-edit"

# Content models whose payload is plain serialisable text
TEXT_CONTENT_MODELS = frozenset(
    {"wikitext", "text", "css", "sanitized-css", "javascript", "json"}
)

_ILLEGAL_TITLE_CHARS = re.compile(r"[#<>\[\]|{}]")


# ---------------------------------------------------------------------
# Edit flags
# ---------------------------------------------------------------------

class EditFlag(IntFlag):
    NONE = 0
    INTERNAL = 1
    SUPPRESS_RC = 2
    AUTOSUMMARY = 4


# ---------------------------------------------------------------------
# Titles
# ---------------------------------------------------------------------

class InvalidTitleError(ValueError):
    """Raised when a string cannot be used as a page title."""


def normalize_title(title: str) -> str:
    """
    Normalise a page title the way the wiki stores it.

    Underscores become spaces, surrounding whitespace is dropped and the
    first letter is upper-cased.

    Raises
    ------
    InvalidTitleError
        If the title is empty or contains characters that are not allowed.
    """
    normalized = re.sub(r"\s+", " ", title.replace("_", " ")).strip()

    if not normalized:
        raise InvalidTitleError("Title must be non-empty.")

    if _ILLEGAL_TITLE_CHARS.search(normalized):
        raise InvalidTitleError(f"Title contains illegal characters: {title!r}")

    return normalized[0].upper() + normalized[1:]


# ---------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------

class PageIdentity(BaseModel):
    """
    A resolved page. `page_id` is None for pages that do not exist yet.
    """
    title: str = Field(..., min_length=1)
    page_id: Optional[int] = Field(default=None, ge=1)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def exists(self) -> bool:
        return self.page_id is not None


class Content(BaseModel):
    """
    Slot payload together with the content model that interprets it.
    """
    model_id: str = Field(..., min_length=1)
    text: str = ""

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def is_textual(self) -> bool:
        return self.model_id in TEXT_CONTENT_MODELS

    @property
    def sha1(self) -> str:
        return hashlib.sha1(self.text.encode("utf-8")).hexdigest()

    def serialize(self) -> str:
        return self.text


class Revision(BaseModel):
    """
    Immutable snapshot of all slots of a page.
    """
    rev_id: int = Field(..., ge=1)
    page_id: int = Field(..., ge=1)
    title: str
    slots: Dict[str, Content]
    parent_id: Optional[int] = None
    actor: str = ""
    comment: str = ""
    flags: int = 0
    tags: Tuple[str, ...] = ()
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(frozen=True, extra="forbid")

    def has_slot(self, role: str) -> bool:
        return role in self.slots

    def get_content(self, role: str) -> Optional[Content]:
        return self.slots.get(role)

    @property
    def slot_roles(self) -> List[str]:
        return sorted(self.slots)

    @property
    def sha1(self) -> str:
        return slots_sha1(self.slots)


def slots_sha1(slots: Dict[str, Content]) -> str:
    """Aggregate hash over a slot map, in role order."""
    digest = hashlib.sha1()
    for role in sorted(slots):
        content = slots[role]
        digest.update(f"{role}\0{content.model_id}\0{content.sha1}\n".encode("utf-8"))
    return digest.hexdigest()


class SaveResult(BaseModel):
    """
    Outcome of a committed edit.

    `revision` is the newly created revision, or the unchanged current one
    for a null edit.
    """
    revision: Optional[Revision] = None
    unchanged: bool = False
    created: bool = False

    model_config = ConfigDict(frozen=True, extra="forbid")
