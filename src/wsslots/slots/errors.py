"""
Slot Edit Errors

Structured failures reported by the slot editing workflow. Every
`SlotEditError` carries a human-readable message and a short machine code
that the API layer hands back to the client unchanged.

Store-level errors are defined here as well but are never translated into
`SlotEditError`; they propagate to the caller as-is.
"""

from __future__ import annotations


# ---------------------------------------------------------------------
# Slot edit taxonomy
# ---------------------------------------------------------------------

class SlotEditError(Exception):
    """Base class for expected slot edit failures."""

    code: str = "sloteditfailed"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def as_tuple(self) -> tuple[str, str]:
        return self.message, self.code


class InvalidPageError(SlotEditError):
    """Raised when the requested page cannot be resolved."""

    code = "invalidpage"

    def __init__(self, message: str = "The given page is not valid.") -> None:
        super().__init__(message)


class UnknownSlotError(SlotEditError):
    """Raised when the slot is not a registered slot role."""

    code = "unknownslot"

    def __init__(self, slot_name: str) -> None:
        super().__init__(f'Unrecognized value for parameter "slot": {slot_name}.')
        self.slot_name = slot_name


class AppendNotSupportedError(SlotEditError):
    """
    Raised when appending to a slot whose content model is not text.
    The content model id is used as the error code.
    """

    def __init__(self, model_id: str) -> None:
        super().__init__(
            f"Can't append to pages using content model {model_id}.",
            code=model_id,
        )
        self.model_id = model_id


# ---------------------------------------------------------------------
# Store errors
# ---------------------------------------------------------------------

class RevisionStoreError(RuntimeError):
    """Raised by a page store when a revision cannot be persisted."""


class PageNotFoundError(RevisionStoreError):
    """Raised when a page that must exist does not."""
