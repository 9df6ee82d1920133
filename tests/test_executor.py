"""Tests for content item migration."""

import pytest

from kontent_migrator.errors import MigrationError
from kontent_migrator.executor import ItemMigrationExecutor, find_variant_value
from kontent_migrator.models.element import type_value
from kontent_migrator.models.mapping import MigrationConfig
from kontent_migrator.services.transformer import ValueTransformer
from tests.conftest import FakeManagementClient, make_element, variant_for


@pytest.fixture
def config(source_type, target_type):
    return MigrationConfig.create(source_type, target_type)


@pytest.fixture
def variants():
    return {
        "item-1": variant_for({
            "id-title": "Hello",
            "id-body": "<p>Some <b>bold</b> text</p>",
            "id-rating": 4.0,
            "id-published_date": "2024-01-15T10:30:00Z",
        }),
        "item-2": variant_for({"id-title": "Second"}),
    }


def executor_for(client, **kwargs):
    sleeps = []
    executor = ItemMigrationExecutor(client, sleep=sleeps.append, **kwargs)
    return executor, sleeps


class TestFindVariantValue:

    def test_by_id_or_codename(self):
        element = make_element("title")
        assert find_variant_value(variant_for({"id-title": "x"}), element) == (True, "x")
        by_codename = {"elements": [{"element": {"codename": "title"}, "value": "y"}]}
        assert find_variant_value(by_codename, element) == (True, "y")

    def test_missing(self):
        assert find_variant_value({"elements": []}, make_element("title")) == (False, None)

    def test_present_with_null_value(self):
        assert find_variant_value(variant_for({"id-title": None}), make_element("title")) == (True, None)


class TestItemMigrationExecutor:

    def test_migrates_items(self, config, items, variants):
        client = FakeManagementClient(variants=variants)
        executor, sleeps = executor_for(client, delay_seconds=0.2)

        progress = executor.execute(config, items)

        assert progress.total == 2
        assert progress.processed == 2
        assert progress.successful == 2
        assert progress.failed == 0
        assert sleeps == [0.2, 0.2]
        assert [i["name"] for i in client.created_items] == ["First Post (Migrated)", "Second Post (Migrated)"]
        assert client.created_items[0]["type"] == {"codename": "blog_post"}
        assert progress.results[0].message == "Migrated to new-1"
        assert progress.duration_seconds is not None

    def test_elements_are_transformed(self, config, items, variants):
        client = FakeManagementClient(variants=variants)
        executor, _ = executor_for(client)

        executor.execute(config, items[:1])

        upsert = client.upserts[0]
        assert upsert["item_id"] == "new-1"
        assert upsert["language_id"] == "lang-default"
        assert upsert["elements"] == [
            {"element": {"codename": "title"}, "value": "Hello"},
            {"element": {"codename": "content"}, "value": "Some bold text"},
            {"element": {"codename": "score"}, "value": "4"},
            {"element": {"codename": "publication_date"}, "value": "2024-01-15T10:30:00Z"},
        ]

    def test_missing_source_elements_are_omitted(self, config, items, variants):
        client = FakeManagementClient(variants=variants)
        executor, _ = executor_for(client)

        executor.execute(config, items[1:])

        assert client.upserts[0]["elements"] == [{"element": {"codename": "title"}, "value": "Second"}]

    def test_failed_item_does_not_stop_run(self, config, items, variants):
        del variants["item-1"]
        client = FakeManagementClient(variants=variants)
        executor, _ = executor_for(client)

        progress = executor.execute(config, items)

        assert progress.failed == 1
        assert progress.successful == 1
        error = progress.errors[0]
        assert error.item_id == "item-1"
        assert error.error == "HTTP 404: variant not found"
        assert error.details["status_code"] == 404
        assert [r.success for r in progress.results] == [False, True]

    def test_missing_language_id(self, config, items):
        client = FakeManagementClient(variants={"item-1": {"elements": []}})
        executor, _ = executor_for(client)

        progress = executor.execute(config, items[:1])

        assert progress.failed == 1
        assert progress.errors[0].error == "Source item language ID is missing"
        assert progress.errors[0].details is None
        assert client.created_items == []
        assert client.upserts == []

    def test_progress_callback_gets_snapshots(self, config, items, variants):
        snapshots = []
        executor, _ = executor_for(FakeManagementClient(variants=variants), on_progress=snapshots.append)

        executor.execute(config, items)

        assert [s.processed for s in snapshots] == [1, 2]
        assert len(snapshots[0].results) == 1

    def test_no_delay(self, config, items, variants):
        executor, sleeps = executor_for(FakeManagementClient(variants=variants), delay_seconds=0)
        executor.execute(config, items)
        assert sleeps == []

    def test_no_valid_mappings(self, source_type, target_type, items):
        config = MigrationConfig.create(source_type, target_type)
        for mapping in config.field_mappings:
            config.update_field_mapping(mapping.source_field.id, None)

        executor, _ = executor_for(FakeManagementClient())
        with pytest.raises(MigrationError, match="No valid field mappings found"):
            executor.execute(config, items)

    def test_missing_transform_adds_warning(self, config, variants):
        class NoDates(ValueTransformer):
            def has_transform(self, source_type, target_type):
                return type_value(target_type) != "date_time"

        executor, _ = executor_for(FakeManagementClient(), transformer=NoDates())

        elements, warnings = executor.build_elements(variants["item-1"], config.valid_mappings)

        assert [e["element"]["codename"] for e in elements] == ["title", "content", "score"]
        assert warnings == ["No transformation available from date_time to date_time"]
