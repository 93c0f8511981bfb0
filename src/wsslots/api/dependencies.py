from typing import Optional

from fastapi import Depends

from ..config import Settings, settings
from ..semantic.merge import SemanticMergeAdapter
from ..slots.editor import SlotEditOrchestrator
from ..slots.registry import SlotRoleRegistry
from ..slots.store import InMemoryPageStore, PageStore


def get_settings() -> Settings:
    return settings


def build_page_store(app_settings: Settings) -> InMemoryPageStore:
    """
    Create a page store with the configured slot roles and the semantic
    slot merge hook registered.
    """
    store = InMemoryPageStore(SlotRoleRegistry.from_settings(app_settings))
    SemanticMergeAdapter(store, app_settings).register()
    return store


# Built on first use so tests can patch settings beforehand
_global_store: Optional[InMemoryPageStore] = None


def get_page_store() -> PageStore:
    global _global_store
    if _global_store is None:
        _global_store = build_page_store(settings)
    return _global_store


def get_orchestrator(
    store: PageStore = Depends(get_page_store),
    app_settings: Settings = Depends(get_settings),
) -> SlotEditOrchestrator:
    return SlotEditOrchestrator(store, app_settings)
