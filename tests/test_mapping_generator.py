"""Tests for automatic field mapping."""

from kontent_migrator.models.element import ElementType, TextOptions
from kontent_migrator.models.mapping import MigrationConfig
from kontent_migrator.services.mapping_generator import find_best_match, generate_mappings, remap
from tests.conftest import make_element


class TestGenerateMappings:

    def test_one_mapping_per_source_in_order(self, source_type, target_type):
        mappings = generate_mappings(source_type.elements, target_type.elements)
        assert [m.source_field.codename for m in mappings] == [
            "title", "body", "rating", "published_date", "category",
        ]

    def test_codename_match_wins(self, source_type, target_type):
        mappings = generate_mappings(source_type.elements, target_type.elements)
        title = mappings[0]
        assert title.target_field.codename == "title"
        assert title.is_compatible
        assert not title.transformation_needed
        assert title.hint == "Direct mapping possible"

    def test_name_match_ignores_case(self):
        source = make_element("summary", name="SUMMARY")
        target = make_element("abstract", name="Summary")
        mapping = generate_mappings([source], [target])[0]
        assert mapping.target_field is target

    def test_name_match_with_conversion(self, source_type, target_type):
        body = generate_mappings(source_type.elements, target_type.elements)[1]
        assert body.target_field.codename == "content"
        assert body.transformation_needed
        assert body.can_transform
        assert body.hint == (
            "Transformation: Rich Text -> Text "
            "(Rich text will be converted to plain text (HTML tags removed))"
        )

    def test_fuzzy_match_on_shared_stem(self, source_type, target_type):
        published = generate_mappings(source_type.elements, target_type.elements)[3]
        assert published.target_field.codename == "publication_date"
        assert published.is_compatible

    def test_no_match(self):
        mapping = generate_mappings([make_element("foo", name="Foo")], [make_element("bar", name="Bar")])[0]
        assert mapping.target_field is None
        assert not mapping.is_compatible
        assert not mapping.can_transform
        assert mapping.warnings == ["No matching field found"]
        assert mapping.hint == "No target field selected"

    def test_match_may_be_incompatible(self):
        source = make_element("image", ElementType.ASSET)
        target = make_element("image", ElementType.TEXT)
        mapping = generate_mappings([source], [target])[0]
        assert mapping.target_field is target
        assert not mapping.is_compatible
        assert mapping.hint == "Incompatible: Incompatible types: asset cannot be converted to text"

    def test_targets_may_be_shared(self):
        sources = [make_element("title", name="Title"), make_element("headline", name="Title")]
        mappings = generate_mappings(sources, [make_element("title", name="Title")])
        assert mappings[0].target_field is mappings[1].target_field

    def test_deterministic(self, source_type, target_type):
        first = [m.to_dict() for m in generate_mappings(source_type.elements, target_type.elements)]
        second = [m.to_dict() for m in generate_mappings(source_type.elements, target_type.elements)]
        assert first == second

    def test_empty_inputs(self):
        assert generate_mappings([], [make_element("a")]) == []
        assert generate_mappings([make_element("a")], [])[0].target_field is None


class TestFindBestMatch:

    def test_score_must_exceed_half(self):
        source = make_element("a", name="Author Name")
        # One of two words in common scores exactly 0.5
        assert find_best_match(source, [make_element("b", name="Author Bio")]) is None

    def test_substring_words(self):
        source = make_element("a", name="Author Name")
        target = make_element("b", name="Authors Name")
        assert find_best_match(source, [target]) is target

    def test_first_best_target_wins_on_tie(self):
        source = make_element("a", name="Main Image")
        first = make_element("b", name="Main Images")
        second = make_element("c", name="Main Image Gallery Large")
        third = make_element("d", name="Images Main")
        assert find_best_match(source, [first, second, third]) is first

    def test_shared_stem_relates_words(self):
        source = make_element("a", name="Description")
        target = make_element("b", name="Descriptor")
        # Related through the five letter stem, not a substring
        assert find_best_match(source, [target]) is target

    def test_short_words_need_substring(self):
        assert find_best_match(make_element("a", name="Note"), [make_element("b", name="Notch")]) is None

    def test_stem_needs_five_shared_letters(self):
        # "categ" vs "catal"
        source = make_element("a", name="Category")
        assert find_best_match(source, [make_element("b", name="Catalog")]) is None

    def test_empty_names_never_match(self):
        assert find_best_match(make_element("a", name=" "), [make_element("b", name="Title")]) is None
        assert find_best_match(make_element("a", name="Title"), [make_element("b", name=" ")]) is None


class TestRemap:

    def test_remap_to_other_target(self):
        source = make_element("title", options=TextOptions(max_length=50))
        mapping = generate_mappings([source], [make_element("title")])[0]
        new_target = make_element("headline", ElementType.RICH_TEXT)

        result = remap(mapping, new_target)

        assert result is mapping
        assert mapping.target_field is new_target
        assert mapping.transformation_needed
        assert mapping.warnings == ["Text will be wrapped in paragraph tags"]

    def test_remap_to_none(self):
        mapping = generate_mappings([make_element("title")], [make_element("title")])[0]
        remap(mapping, None)
        assert mapping.target_field is None
        assert not mapping.is_compatible
        assert mapping.warnings == ["No target field selected"]


class TestMigrationConfig:

    def test_create_generates_mappings(self, source_type, target_type):
        config = MigrationConfig.create(source_type, target_type, language="en-US")
        assert config.language == "en-US"
        assert len(config.field_mappings) == len(source_type.elements)

    def test_valid_mappings_exclude_unmapped_and_incompatible(self, source_type, target_type):
        config = MigrationConfig.create(source_type, target_type)
        codenames = [m.source_field.codename for m in config.valid_mappings]
        # category (taxonomy) has no counterpart
        assert codenames == ["title", "body", "rating", "published_date"]

    def test_update_field_mapping_changes_only_one(self, source_type, target_type):
        config = MigrationConfig.create(source_type, target_type)
        before = [m.to_dict() for m in config.field_mappings]

        updated = config.update_field_mapping("id-rating", "t-title")

        assert updated.target_field.codename == "title"
        assert updated.warnings == ["Numbers will be converted to text strings"]
        after = [m.to_dict() for m in config.field_mappings]
        assert [a for a, b in zip(after, before) if a != b] == [updated.to_dict()]

    def test_update_field_mapping_unknown_source(self, source_type, target_type):
        config = MigrationConfig.create(source_type, target_type)
        assert config.update_field_mapping("missing", "t-title") is None

    def test_update_field_mapping_unknown_target_unmaps(self, source_type, target_type):
        config = MigrationConfig.create(source_type, target_type)
        mapping = config.update_field_mapping("id-title", "missing")
        assert mapping.target_field is None
        assert mapping.warnings == ["No target field selected"]

    def test_update_by_codename(self, source_type, target_type):
        config = MigrationConfig.create(source_type, target_type)
        mapping = config.update_field_mapping_by_codename("body", "title")
        assert mapping.target_field.codename == "title"
        assert config.update_field_mapping_by_codename("nope", "title") is None
