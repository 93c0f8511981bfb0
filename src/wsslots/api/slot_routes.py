"""
Slot Routes: editslot Endpoint

Slot-aware editing and reading of wiki pages.

Security Model:
- Scope-based access control via `require_scopes`
- Creating a page additionally requires the `create` scope
- Write requests must be POSTed with a bearer token
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from .models import EditSlotRequest, OperationResult, SlotContentResponse
from .dependencies import get_orchestrator, get_page_store
from ..auth.security import require_scopes
from ..auth.models import UserContext
from ..slots.editor import SlotEditOrchestrator
from ..slots.errors import SlotEditError
from ..slots.models import MAIN_SLOT
from ..slots.store import PageStore

logger = logging.getLogger("wsslots.api")

# ---------------------------------------------------------------------
# Router Configuration
# ---------------------------------------------------------------------

router = APIRouter(
    prefix="/api",
    tags=["slots"],
)

# ---------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------

@router.post(
    "/editslot",
    response_model=OperationResult,
    status_code=status.HTTP_200_OK,
    summary="Edit or create a single slot of a page",
    description=(
        "Replaces, appends to or removes the content of one slot of a page. "
        "Requires the `edit` scope, and `create` for new pages."
    ),
)
def edit_slot(
    req: EditSlotRequest,
    user: Annotated[UserContext, Depends(require_scopes("edit"))],
    store: Annotated[PageStore, Depends(get_page_store)],
    editor: Annotated[SlotEditOrchestrator, Depends(get_orchestrator)],
) -> OperationResult:
    """
    Apply a slot edit on behalf of the authenticated user.

    Slot edit failures are rendered by the global `SlotEditError` handler.
    """
    try:
        page = store.resolve_page(title=req.title, page_id=req.pageid)

        if not page.exists and not user.has_scope("create"):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Missing required scope(s): create",
            )

        result = editor.edit_slot(
            user.username,
            page,
            req.text,
            req.slot,
            req.summary,
            req.append,
            req.watchlist,
        )
    except SlotEditError as exc:
        logger.critical(
            'Editing slot failed while performing edit through the "editslot" API: %s',
            exc.message,
            extra={"slot_name": req.slot, "code": exc.code},
        )
        raise

    if result.created:
        result_status = "created"
    elif result.unchanged:
        result_status = "ok"
    else:
        result_status = "updated"

    return OperationResult(
        status=result_status,
        details={
            "title": page.title,
            "slot": req.slot,
            "revision_id": result.revision.rev_id if result.revision else None,
        },
    )


@router.get(
    "/slotcontent",
    response_model=SlotContentResponse,
    summary="Read the content of a slot",
)
def get_slot_content(
    user: Annotated[UserContext, Depends(require_scopes("read"))],
    store: Annotated[PageStore, Depends(get_page_store)],
    editor: Annotated[SlotEditOrchestrator, Depends(get_orchestrator)],
    title: str = Query(..., min_length=1),
    slot: str = Query(MAIN_SLOT, min_length=1),
) -> SlotContentResponse:
    page = store.resolve_page(title=title)
    content = editor.get_slot_content(page, slot)

    if content is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Slot '{slot}' does not exist on page '{page.title}'.",
        )

    revision = store.get_current_revision(page)

    return SlotContentResponse(
        title=page.title,
        slot=slot,
        model=content.model_id,
        text=content.serialize(),
        revision_id=revision.rev_id,
    )
