"""Migration execution models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from dateutil import parser as date_parser

from .element import ContentTypeInfo


# Content item migration

@dataclass
class MigrationItem:
    """A content item selected for migration."""
    id: str
    name: str
    codename: str
    last_modified: Optional[datetime] = None
    language: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "codename": self.codename,
            "last_modified": self.last_modified.isoformat() if self.last_modified else None,
            "language": self.language,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MigrationItem":
        last_modified = data.get("last_modified")
        if isinstance(last_modified, str) and last_modified:
            last_modified = date_parser.isoparse(last_modified)
        elif not isinstance(last_modified, datetime):
            last_modified = None
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            codename=data.get("codename", ""),
            last_modified=last_modified,
            language=data.get("language"),
        )

    @classmethod
    def from_delivery(cls, item: Dict[str, Any]) -> "MigrationItem":
        """Create from a Delivery API item (uses its ``system`` block)."""
        system = item.get("system", {})
        last_modified = system.get("last_modified")
        return cls(
            id=system.get("id", ""),
            name=system.get("name", ""),
            codename=system.get("codename", ""),
            last_modified=date_parser.isoparse(last_modified) if last_modified else None,
            language=system.get("language"),
        )


@dataclass
class ItemError:
    """Failure of a single item during migration."""
    item_id: str
    item_name: str
    error: str
    details: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item_id": self.item_id,
            "item_name": self.item_name,
            "error": self.error,
            "details": self.details,
        }


@dataclass
class ItemResult:
    """Outcome of migrating one item."""
    item: MigrationItem
    success: bool
    new_item_id: Optional[str] = None
    message: str = ""
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item": self.item.to_dict(),
            "status": "success" if self.success else "error",
            "new_item_id": self.new_item_id,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class MigrationProgress:
    """Running totals of an item migration."""
    total: int = 0
    processed: int = 0
    successful: int = 0
    failed: int = 0
    errors: List[ItemError] = field(default_factory=list)
    results: List[ItemResult] = field(default_factory=list)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    @property
    def percent(self) -> float:
        if self.total == 0:
            return 0.0
        return self.processed / self.total * 100

    def copy(self) -> "MigrationProgress":
        """Snapshot for progress callbacks."""
        return MigrationProgress(
            total=self.total,
            processed=self.processed,
            successful=self.successful,
            failed=self.failed,
            errors=list(self.errors),
            results=list(self.results),
            started_at=self.started_at,
            completed_at=self.completed_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "processed": self.processed,
            "successful": self.successful,
            "failed": self.failed,
            "errors": [e.to_dict() for e in self.errors],
            "results": [r.to_dict() for r in self.results],
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
        }


# Dry run

@dataclass
class DryRunField:
    source_field: str
    source_value: Any
    target_field: str
    transformed_value: Any
    transformation_type: str  # "direct" or "text -> rich_text"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_field": self.source_field,
            "source_value": self.source_value,
            "target_field": self.target_field,
            "transformed_value": self.transformed_value,
            "transformation_type": self.transformation_type,
        }


@dataclass
class DryRunResult:
    item_name: str
    transformed_fields: List[DryRunField] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item_name": self.item_name,
            "transformed_fields": [f.to_dict() for f in self.transformed_fields],
            "warnings": list(self.warnings),
        }


# Content type migration between environments

@dataclass
class Environment:
    """A Kontent.ai environment and its Management API key."""
    id: str
    api_key: str = ""
    name: str = ""
    preview_api_key: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.id and self.api_key)

    def to_dict(self) -> Dict[str, Any]:
        # API keys are never written out
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Environment":
        return cls(
            id=data.get("id") or data.get("environment_id", ""),
            api_key=data.get("api_key") or data.get("management_api_key", ""),
            name=data.get("name", ""),
            preview_api_key=data.get("preview_api_key"),
        )


@dataclass
class TypeMigrationOptions:
    include_content_groups: bool = False
    overwrite_existing: bool = False
    dry_run: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "include_content_groups": self.include_content_groups,
            "overwrite_existing": self.overwrite_existing,
            "dry_run": self.dry_run,
        }


@dataclass
class TypeMigrationConfig:
    """Which content types to copy from one environment to another."""
    source_environment: Environment
    target_environment: Environment
    selected_content_types: List[str] = field(default_factory=list)
    options: TypeMigrationOptions = field(default_factory=TypeMigrationOptions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_environment": self.source_environment.to_dict(),
            "target_environment": self.target_environment.to_dict(),
            "selected_content_types": list(self.selected_content_types),
            "options": self.options.to_dict(),
        }


@dataclass
class TypeConflict:
    content_type: str
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {"content_type": self.content_type, "reason": self.reason}


@dataclass
class TypeMigrationPlan:
    """Result of comparing source and target environments."""
    to_create: List[ContentTypeInfo] = field(default_factory=list)
    to_update: List[ContentTypeInfo] = field(default_factory=list)
    conflicts: List[TypeConflict] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "to_create": [t.codename for t in self.to_create],
            "to_update": [t.codename for t in self.to_update],
            "conflicts": [c.to_dict() for c in self.conflicts],
        }


@dataclass
class TypeMigrationError:
    content_type: str
    error: str

    def to_dict(self) -> Dict[str, Any]:
        return {"content_type": self.content_type, "error": self.error}


@dataclass
class TypeMigrationResult:
    success: bool = False
    created: List[ContentTypeInfo] = field(default_factory=list)
    updated: List[ContentTypeInfo] = field(default_factory=list)
    skipped: List[ContentTypeInfo] = field(default_factory=list)
    errors: List[TypeMigrationError] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "created": [t.codename for t in self.created],
            "updated": [t.codename for t in self.updated],
            "skipped": [t.codename for t in self.skipped],
            "errors": [e.to_dict() for e in self.errors],
            "warnings": list(self.warnings),
        }


class MigrationState(str, Enum):
    """Overall state of a content type migration."""
    IDLE = "idle"
    ANALYZING = "analyzing"
    MIGRATING = "migrating"
    COMPLETED = "completed"
    ERROR = "error"


class MigrationStep(str, Enum):
    """Steps of a content type migration."""
    CONNECTING = "connecting"
    ANALYZING_SOURCE = "analyzing-source"
    ANALYZING_TARGET = "analyzing-target"
    COMPARING = "comparing"
    MIGRATING_TYPES = "migrating-types"
    VALIDATING = "validating"
    COMPLETED = "completed"

    @property
    def description(self) -> str:
        return STEP_DESCRIPTIONS[self]


STEP_DESCRIPTIONS: Dict[MigrationStep, str] = {
    MigrationStep.CONNECTING: "Connecting to environments...",
    MigrationStep.ANALYZING_SOURCE: "Analyzing source environment...",
    MigrationStep.ANALYZING_TARGET: "Analyzing target environment...",
    MigrationStep.COMPARING: "Comparing content types...",
    MigrationStep.MIGRATING_TYPES: "Migrating content types...",
    MigrationStep.VALIDATING: "Validating migration results...",
    MigrationStep.COMPLETED: "Migration completed!",
}


@dataclass
class TypeMigrationStatus:
    """Status update emitted while migrating content types."""
    state: MigrationState
    current_step: str
    progress: float
    total_steps: int = len(MigrationStep)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "current_step": self.current_step,
            "progress": self.progress,
            "total_steps": self.total_steps,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }
