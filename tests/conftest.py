import pytest

from wsslots.config import Settings, SlotDefinition
from wsslots.semantic.merge import SemanticMergeAdapter
from wsslots.slots.editor import SlotEditOrchestrator
from wsslots.slots.registry import SlotRoleRegistry
from wsslots.slots.store import InMemoryPageStore


@pytest.fixture
def slot_settings():
    return Settings(
        defined_slots={
            "seo": SlotDefinition(),
            "data": SlotDefinition(content_model="json"),
            "item": SlotDefinition(content_model="wikibase-item"),
        },
        semantic_slots=["seo", "data"],
        do_purge=False,
    )


@pytest.fixture
def store(slot_settings):
    page_store = InMemoryPageStore(SlotRoleRegistry.from_settings(slot_settings))
    SemanticMergeAdapter(page_store, slot_settings).register()
    return page_store


@pytest.fixture
def editor(store, slot_settings):
    return SlotEditOrchestrator(store, slot_settings)
