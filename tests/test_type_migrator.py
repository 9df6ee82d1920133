"""Tests for content type migration between environments."""

from datetime import datetime, timezone

import pytest

from kontent_migrator.errors import KontentApiError
from kontent_migrator.models.element import ContentTypeInfo
from kontent_migrator.models.migration import (
    Environment,
    MigrationState,
    TypeMigrationConfig,
    TypeMigrationOptions,
)
from kontent_migrator.type_migrator import ContentTypeMigrator
from tests.conftest import FakeManagementClient, make_element

OLD = datetime(2024, 1, 1, tzinfo=timezone.utc)
NEW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def content_type(codename, last_modified=OLD):
    return ContentTypeInfo(
        id=f"id-{codename}",
        name=codename.title(),
        codename=codename,
        elements=[make_element("title")],
        last_modified=last_modified,
    )


@pytest.fixture
def source():
    return FakeManagementClient(content_types=[
        content_type("article", NEW),
        content_type("author"),
        content_type("video"),
    ])


@pytest.fixture
def target():
    return FakeManagementClient(content_types=[content_type("article", OLD)])


@pytest.fixture
def migrator(source, target):
    clients = {"source": source, "target": target}
    statuses = []
    migrator = ContentTypeMigrator(
        client_factory=lambda environment: clients[environment.id],
        on_status=statuses.append,
    )
    migrator.statuses = statuses
    return migrator


def migration_config(types, **options):
    return TypeMigrationConfig(
        source_environment=Environment(id="source", api_key="s-key"),
        target_environment=Environment(id="target", api_key="t-key"),
        selected_content_types=types,
        options=TypeMigrationOptions(**options),
    )


class TestValidation:

    def test_valid(self, migrator):
        assert migrator.validate_configuration(migration_config(["author"])) == (True, [])

    def test_incomplete(self, migrator):
        config = migration_config([])
        config.target_environment = Environment(id="target")
        valid, errors = migrator.validate_configuration(config)
        assert not valid
        assert errors == [
            "Target environment configuration is incomplete",
            "No content types selected for migration",
        ]

    def test_unreachable(self, migrator, target):
        target.connected = False
        valid, errors = migrator.validate_configuration(migration_config(["author"]))
        assert errors == ["Cannot connect to target environment"]


class TestCompare:

    def test_plan(self, migrator):
        plan = migrator.compare(migration_config(["article", "author", "missing"]))
        assert plan.to_dict() == {
            "to_create": ["author"],
            "to_update": ["article"],
            "conflicts": [{
                "content_type": "missing",
                "reason": "Content type not found in source environment",
            }],
        }

    def test_up_to_date_type_is_left_alone(self, migrator, target):
        target.content_types = [content_type("article", NEW)]
        plan = migrator.compare(migration_config(["article"]))
        assert plan.to_create == [] and plan.to_update == []

    def test_listing_failure(self, migrator, source):
        def fail():
            raise KontentApiError("HTTP 401: Unauthorized", status_code=401)

        source.list_content_types = fail
        plan = migrator.compare(migration_config(["article"]))
        assert plan.to_dict()["conflicts"] == [{
            "content_type": "ALL",
            "reason": "Error during comparison: HTTP 401: Unauthorized",
        }]


class TestMigrate:

    def test_creates_missing_types(self, migrator, target):
        result = migrator.migrate(migration_config(["author", "video"]))

        assert result.success
        assert [t.codename for t in result.created] == ["author", "video"]
        assert [t.codename for t in target.added_types] == ["author", "video"]
        assert migrator.status.state == MigrationState.COMPLETED
        assert migrator.status.progress == 100
        assert migrator.status.current_step == "Migration completed!"

    def test_status_sequence(self, migrator):
        migrator.migrate(migration_config(["author"]))
        assert [s.progress for s in migrator.statuses] == [5, 10, 15, 20, 40, 60, 40, 80, 90, 100]
        assert migrator.statuses[-3].state == MigrationState.MIGRATING

    def test_reset(self, migrator):
        migrator.migrate(migration_config(["author"]))
        migrator.reset()
        assert migrator.status.state == MigrationState.IDLE
        assert migrator.status.progress == 0

    def test_existing_types_are_skipped(self, migrator, target):
        result = migrator.migrate(migration_config(["article"], overwrite_existing=True))

        assert result.success
        assert result.created == []
        assert [t.codename for t in result.skipped] == ["article"]
        assert result.warnings == ["Updating existing content types is not supported: article"]
        assert target.added_types == []

    def test_dry_run_writes_nothing(self, migrator, target):
        result = migrator.migrate(migration_config(["author", "article"], dry_run=True))

        assert result.success
        assert [t.codename for t in result.created] == ["author"]
        assert [t.codename for t in result.updated] == ["article"]
        assert target.added_types == []

    def test_conflicts_abort(self, migrator, target):
        result = migrator.migrate(migration_config(["author", "missing"]))

        assert not result.success
        assert result.to_dict()["errors"] == [
            {"content_type": "missing", "error": "Content type not found in source environment"},
            {
                "content_type": "GENERAL",
                "error": "Migration conflicts detected. Please resolve them before proceeding.",
            },
        ]
        assert target.added_types == []
        assert migrator.status.state == MigrationState.ERROR

    def test_invalid_configuration(self, migrator):
        result = migrator.migrate(migration_config([]))
        assert not result.success
        assert result.errors[0].content_type == "GENERAL"
        assert result.errors[0].error == (
            "Configuration validation failed: No content types selected for migration"
        )

    def test_failed_type_does_not_stop_run(self, migrator, target):
        target.fail_on_add = {"author"}

        result = migrator.migrate(migration_config(["author", "video"]))

        assert not result.success
        assert [t.codename for t in result.created] == ["video"]
        assert result.to_dict()["errors"] == [
            {"content_type": "author", "error": "Failed to create: HTTP 400: invalid codename"},
        ]
