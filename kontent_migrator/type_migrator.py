"""Content type migration between two Kontent.ai environments."""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from .clients.management import ManagementClient
from .errors import KontentApiError, KontentMigratorError, MigrationError
from .models.migration import (
    Environment,
    MigrationState,
    MigrationStep,
    TypeConflict,
    TypeMigrationConfig,
    TypeMigrationError,
    TypeMigrationPlan,
    TypeMigrationResult,
    TypeMigrationStatus,
)

logger = logging.getLogger(__name__)


def management_client_for(environment: Environment) -> ManagementClient:
    return ManagementClient(environment_id=environment.id, api_key=environment.api_key)


class ContentTypeMigrator:
    """
    Copies content types from a source environment into a target environment.

    Handles:
    - Configuration and connection checks
    - Comparison of both environments into a migration plan
    - Dry runs that only report the plan
    - Creation of missing types and verification afterwards

    Types that already exist in the target are skipped: the Management API
    calls used here cannot modify an existing type in place.
    """

    def __init__(
        self,
        client_factory: Callable[[Environment], ManagementClient] = management_client_for,
        on_status: Optional[Callable[[TypeMigrationStatus], None]] = None
    ):
        """
        Initialize the migrator.

        Args:
            client_factory: Builds a Management API client for an environment
            on_status: Called with every status change
        """
        self.client_factory = client_factory
        self.on_status = on_status
        self.status = TypeMigrationStatus(
            state=MigrationState.IDLE,
            current_step=MigrationStep.CONNECTING.description,
            progress=0,
        )
        self._clients: Dict[Tuple[str, str], ManagementClient] = {}

    def _client(self, environment: Environment) -> ManagementClient:
        key = (environment.id, environment.api_key)
        if key not in self._clients:
            self._clients[key] = self.client_factory(environment)
        return self._clients[key]

    def _update_status(
        self,
        state: MigrationState,
        step: MigrationStep,
        progress: float,
        errors: Optional[List[str]] = None,
        warnings: Optional[List[str]] = None
    ):
        self.status = TypeMigrationStatus(
            state=state,
            current_step=step.description,
            progress=progress,
            errors=list(errors or []),
            warnings=list(warnings or []),
        )
        logger.debug(f"[{progress:.0f}%] {step.description}")
        if self.on_status:
            self.on_status(self.status)

    def validate_configuration(self, config: TypeMigrationConfig) -> Tuple[bool, List[str]]:
        """
        Check both environments and the selection.

        Returns:
            (valid, errors)
        """
        errors = []

        if not config.source_environment.is_complete:
            errors.append("Source environment configuration is incomplete")
        if not config.target_environment.is_complete:
            errors.append("Target environment configuration is incomplete")
        if not config.selected_content_types:
            errors.append("No content types selected for migration")

        self._update_status(MigrationState.ANALYZING, MigrationStep.CONNECTING, 10)

        environments = [
            ("source", config.source_environment),
            ("target", config.target_environment),
        ]
        for label, environment in environments:
            if not environment.is_complete:
                continue
            try:
                connected = self._client(environment).test_connection()
            except KontentMigratorError as e:
                errors.append(f"Connection test failed: {e}")
                continue
            if not connected:
                errors.append(f"Cannot connect to {label} environment")

        return len(errors) == 0, errors

    def compare(self, config: TypeMigrationConfig) -> TypeMigrationPlan:
        """
        Work out what a migration of the selected types would do.

        Selected types missing from the source are conflicts. Types missing
        from the target are created; types modified more recently in the
        source than in the target are listed for update.
        """
        plan = TypeMigrationPlan()

        try:
            source_types = {
                t.codename: t
                for t in self._client(config.source_environment).list_content_types()
            }
            target_types = {
                t.codename: t
                for t in self._client(config.target_environment).list_content_types()
            }
        except KontentMigratorError as e:
            plan.conflicts.append(TypeConflict(
                content_type="ALL",
                reason=f"Error during comparison: {e}",
            ))
            return plan

        for codename in config.selected_content_types:
            source_type = source_types.get(codename)
            if source_type is None:
                plan.conflicts.append(TypeConflict(
                    content_type=codename,
                    reason="Content type not found in source environment",
                ))
                continue

            target_type = target_types.get(codename)
            if target_type is None:
                plan.to_create.append(source_type)
            elif (
                source_type.last_modified
                and target_type.last_modified
                and source_type.last_modified > target_type.last_modified
            ):
                plan.to_update.append(source_type)

        logger.info(
            f"Plan: {len(plan.to_create)} to create, {len(plan.to_update)} to update, "
            f"{len(plan.conflicts)} conflicts"
        )
        return plan

    def dry_run(self, config: TypeMigrationConfig) -> TypeMigrationPlan:
        """Compare the environments, reporting progress, without writing anything."""
        self._update_status(MigrationState.ANALYZING, MigrationStep.ANALYZING_SOURCE, 20)
        self._update_status(MigrationState.ANALYZING, MigrationStep.ANALYZING_TARGET, 40)
        plan = self.compare(config)
        self._update_status(MigrationState.ANALYZING, MigrationStep.COMPARING, 60)
        return plan

    def migrate(self, config: TypeMigrationConfig) -> TypeMigrationResult:
        """
        Run the content type migration.

        Configuration problems and plan conflicts abort the run; they are
        reported in the result under ``GENERAL`` rather than raised. Failures
        of single types are recorded and the run continues.
        """
        result = TypeMigrationResult()
        options = config.options

        try:
            self._update_status(MigrationState.ANALYZING, MigrationStep.CONNECTING, 5)
            valid, errors = self.validate_configuration(config)
            if not valid:
                raise MigrationError(f"Configuration validation failed: {', '.join(errors)}")

            self._update_status(MigrationState.ANALYZING, MigrationStep.ANALYZING_SOURCE, 15)
            plan = self.dry_run(config)

            if plan.conflicts and not options.dry_run:
                result.errors = [
                    TypeMigrationError(content_type=c.content_type, error=c.reason)
                    for c in plan.conflicts
                ]
                raise MigrationError(
                    "Migration conflicts detected. Please resolve them before proceeding."
                )

            if options.dry_run:
                self._update_status(MigrationState.COMPLETED, MigrationStep.COMPLETED, 100)
                result.success = True
                result.created = list(plan.to_create)
                result.updated = list(plan.to_update)
                return result

            self._migrate_types(config, plan, result)
            self._verify(config, result)

            self._update_status(
                MigrationState.COMPLETED,
                MigrationStep.COMPLETED,
                100,
                warnings=result.warnings,
            )
            result.success = len(result.errors) == 0

        except KontentMigratorError as e:
            logger.error(f"Content type migration failed: {e}")
            self._update_status(MigrationState.ERROR, MigrationStep.COMPLETED, 100, errors=[str(e)])
            result.errors.append(TypeMigrationError(content_type="GENERAL", error=str(e)))

        return result

    def _migrate_types(
        self,
        config: TypeMigrationConfig,
        plan: TypeMigrationPlan,
        result: TypeMigrationResult
    ):
        self._update_status(MigrationState.MIGRATING, MigrationStep.MIGRATING_TYPES, 40)

        target = self._client(config.target_environment)
        total = len(plan.to_create) + len(plan.to_update)
        processed = 0

        for content_type in plan.to_create:
            try:
                target.add_content_type(
                    content_type,
                    include_content_groups=config.options.include_content_groups,
                )
                result.created.append(content_type)
                processed += 1
                self._update_status(
                    MigrationState.MIGRATING,
                    MigrationStep.MIGRATING_TYPES,
                    40 + processed / total * 40,
                )
            except Exception as e:
                logger.error(f"Failed to create {content_type.codename}: {e}")
                result.errors.append(TypeMigrationError(
                    content_type=content_type.codename,
                    error=f"Failed to create: {e}",
                ))

        for content_type in plan.to_update:
            result.skipped.append(content_type)
            if config.options.overwrite_existing:
                result.warnings.append(
                    f"Updating existing content types is not supported: {content_type.codename}"
                )
            processed += 1
            self._update_status(
                MigrationState.MIGRATING,
                MigrationStep.MIGRATING_TYPES,
                40 + processed / total * 40,
                warnings=result.warnings,
            )

    def _verify(self, config: TypeMigrationConfig, result: TypeMigrationResult):
        """Check that every created type can be read back from the target."""
        self._update_status(MigrationState.ANALYZING, MigrationStep.VALIDATING, 90)

        target = self._client(config.target_environment)
        for content_type in result.created + result.updated:
            try:
                exists = target.content_type_exists(content_type.codename)
            except KontentApiError as e:
                logger.warning(f"Could not verify {content_type.codename}: {e}")
                exists = False
            if not exists:
                result.errors.append(TypeMigrationError(
                    content_type=content_type.codename,
                    error="Content type was not found after migration",
                ))

    def reset(self):
        """Return to idle. A running migration is not interrupted."""
        self._update_status(MigrationState.IDLE, MigrationStep.COMPLETED, 0)
