from fastapi import APIRouter
from ..config import settings

router = APIRouter(tags=["health"])

@router.get("/health")
def health():
    return {
        "status": "ok",
        "defined_slots": sorted(settings.defined_slots),
        "semantic_slots": list(settings.semantic_slots),
    }
