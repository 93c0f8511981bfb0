"""
Semantic Data Tests

Covers annotation extraction, the SemanticData container and the merging
of semantic slots into a page's primary data.
"""

from wsslots.config import Settings
from wsslots.semantic.data import CATEGORY_PROPERTY, SORTKEY_PROPERTY, DIProperty, SemanticData
from wsslots.semantic.extractor import AnnotationExtractor
from wsslots.semantic.merge import SemanticMergeAdapter
from wsslots.slots.models import Content, PageIdentity


PAGE = PageIdentity(title="Test page", page_id=1)


class TestExtractor:
    def test_annotations_categories_and_sortkey(self):
        content = Content(
            model_id="wikitext",
            text=(
                "[[Has author::Jane Doe]] and [[has_year::2020|the year]]\n"
                "[[Category:Books]] [[Category:Old_books|sort]]\n"
                "{{DEFAULTSORT:First}} {{DEFAULTSORT:Second}}"
            ),
        )

        data = AnnotationExtractor().extract(content, PAGE, 7)

        assert data.subject == "Test page"
        assert data.to_dict() == {
            "Has author": ["Jane Doe"],
            "Has year": ["2020"],
            CATEGORY_PROPERTY: ["Books", "Old books"],
            SORTKEY_PROPERTY: ["Second"],
        }

    def test_no_annotations_gives_none(self):
        content = Content(model_id="wikitext", text="Plain [[Link]] text")

        assert AnnotationExtractor().extract(content, PAGE) is None

    def test_non_text_content_gives_none(self):
        content = Content(model_id="wikibase-item", text="[[A::b]]")

        assert AnnotationExtractor().extract(content, PAGE) is None


class TestSemanticData:
    def test_user_defined_flag(self):
        assert DIProperty(key="Has author").is_user_defined
        assert not DIProperty(key="_INST").is_user_defined

    def test_import_is_union_without_duplicates(self):
        prop = DIProperty(key="Color")
        first = SemanticData("A")
        first.add_property_value(prop, "red")
        second = SemanticData("B")
        second.add_property_value(prop, "red")
        second.add_property_value(prop, "blue")

        first.import_data_from(second)

        assert first.get_property_values(prop) == ["red", "blue"]
        assert first.subject == "A"

    def test_remove_property(self):
        prop = DIProperty(key="_SKEY")
        data = SemanticData("A")
        data.add_property_value(prop, "x")

        data.remove_property(prop)

        assert not data.has_property(prop)
        assert data.is_empty()


class TestMergeAdapter:
    def test_builtin_property_replaced_by_slot(self, store, editor):
        page = store.resolve_page(title="Test page")
        editor.edit_slot("Alice", page, "{{DEFAULTSORT:Main}}", "main")
        editor.edit_slot("Alice", page, "{{DEFAULTSORT:Slot}}", "seo")

        data = store.get_semantic_data(page)

        assert data.get_property_values(DIProperty(key=SORTKEY_PROPERTY)) == ["Slot"]

    def test_builtin_property_in_primary_set_overridden(self, store, editor, slot_settings):
        page = store.resolve_page(title="Test page")
        editor.edit_slot("Alice", page, "{{DEFAULTSORT:2}}", "seo")

        primary = SemanticData("Test page")
        prop = DIProperty(key="_P")
        primary.add_property_value(prop, "1")
        slot_data = SemanticData("Test page")
        slot_data.add_property_value(prop, "2")

        class FixedExtractor:
            def extract(self, content, page, rev_id=None):
                return slot_data

        adapter = SemanticMergeAdapter(store, slot_settings, extractor=FixedExtractor())

        assert adapter.before_data_update_complete(primary) is True
        assert primary.get_property_values(prop) == ["2"]

    def test_user_properties_are_unioned(self, store, editor):
        page = store.resolve_page(title="Test page")
        editor.edit_slot("Alice", page, "[[Topic::Physics]] [[Category:Science]]", "main")
        editor.edit_slot("Alice", page, "[[Topic::Math]] [[Category:Formal]]", "seo")

        data = store.get_semantic_data(page)

        assert data.get_property_values(DIProperty(key="Topic")) == ["Physics", "Math"]
        assert data.get_property_values(DIProperty(key=CATEGORY_PROPERTY)) == ["Formal"]

    def test_later_slots_take_precedence(self, store, editor):
        page = store.resolve_page(title="Test page")
        editor.edit_slot("Alice", page, "[[Category:From seo]]", "seo")
        editor.edit_slot("Alice", page, '{"note": "[[Category:From data]]"}', "data")

        data = store.get_semantic_data(page)

        assert data.get_property_values(DIProperty(key=CATEGORY_PROPERTY)) == ["From data"]

    def test_unconfigured_slots_ignored(self, store, editor):
        page = store.resolve_page(title="Test page")
        editor.edit_slot("Alice", page, "[[Topic::Hidden]]", "item")

        data = store.get_semantic_data(page)

        assert data.is_empty()

    def test_missing_page_is_noop(self, store):
        adapter = SemanticMergeAdapter(store, Settings(semantic_slots=["seo"]))
        data = SemanticData("Does not exist")

        assert adapter.before_data_update_complete(data) is True
        assert data.is_empty()

    def test_deleted_page_is_noop(self, store, editor, slot_settings):
        page = store.resolve_page(title="Test page")
        editor.edit_slot("Alice", page, "[[Topic::X]]", "seo")
        store.delete_page(store.get_page("Test page"))

        adapter = SemanticMergeAdapter(store, slot_settings)
        data = SemanticData("Test page")

        assert adapter.before_data_update_complete(data) is True
        assert data.is_empty()
