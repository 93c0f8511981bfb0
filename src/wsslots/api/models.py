"""
API Models

Pydantic models for request/response validation of the slot endpoints.
"""

from __future__ import annotations

from typing import Optional, Dict, Any, Literal
from pydantic import BaseModel, Field, ConfigDict, model_validator

from ..slots.models import MAIN_SLOT


class OperationResult(BaseModel):
    """
    Standardized mutation operation result.
    """
    status: Literal["updated", "created", "ok"]
    details: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(extra="forbid")


class EditSlotRequest(BaseModel):
    """
    Parameters of the editslot action. Exactly one of `title` and `pageid`
    identifies the page.
    """
    title: Optional[str] = None
    pageid: Optional[int] = Field(default=None, ge=1)
    text: str = ""
    slot: str = MAIN_SLOT
    append: bool = False
    summary: str = ""
    watchlist: str = ""

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _one_page_identifier(self) -> "EditSlotRequest":
        if self.title is None and self.pageid is None:
            raise ValueError("One of the parameters 'title' and 'pageid' is required.")
        if self.title is not None and self.pageid is not None:
            raise ValueError("The parameters 'title' and 'pageid' can not be used together.")
        return self


class SlotContentResponse(BaseModel):
    """
    Content of a single slot on the current revision of a page.
    """
    title: str
    slot: str
    model: str
    text: str
    revision_id: int

    model_config = ConfigDict(extra="forbid")
