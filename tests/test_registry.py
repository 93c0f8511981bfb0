import pytest

from wsslots.config import Settings, SlotDefinition
from wsslots.slots.models import PageIdentity
from wsslots.slots.registry import SlotRoleRegistry


def test_main_is_always_defined():
    registry = SlotRoleRegistry.from_settings(Settings())

    assert registry.get_defined_roles() == ["main"]
    assert registry.is_defined_role("main")
    assert not registry.is_defined_role("seo")


def test_configured_roles_use_defaults():
    settings = Settings(
        defined_slots={
            "seo": SlotDefinition(),
            "data": SlotDefinition(
                content_model="json",
                slot_role_layout={"display": "section"},
            ),
        },
        default_content_model="text",
    )
    registry = SlotRoleRegistry.from_settings(settings)
    page = PageIdentity(title="Foo")

    seo = registry.get_role_handler("seo")
    assert seo.get_default_model(page) == "text"
    assert seo.layout == settings.default_slot_role_layout

    data = registry.get_role_handler("data")
    assert data.get_default_model(page) == "json"
    assert data.layout == {"display": "section"}


def test_main_model_follows_code_pages():
    registry = SlotRoleRegistry()
    main = registry.get_role_handler("main")

    assert main.get_default_model(PageIdentity(title="MediaWiki:Common.css")) == "css"
    assert main.get_default_model(PageIdentity(title="User:Foo/common.js")) == "javascript"
    assert main.get_default_model(PageIdentity(title="User:Foo/data.json")) == "json"
    assert main.get_default_model(PageIdentity(title="Style.css")) == "wikitext"


def test_duplicate_role_rejected():
    registry = SlotRoleRegistry()
    registry.define_role("seo", "wikitext")

    with pytest.raises(ValueError):
        registry.define_role("seo", "text")

    with pytest.raises(ValueError):
        SlotRoleRegistry.from_settings(Settings(defined_slots={"main": SlotDefinition()}))


def test_unknown_role_handler():
    with pytest.raises(KeyError):
        SlotRoleRegistry().get_role_handler("nope")
