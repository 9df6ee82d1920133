"""Environment configuration for the Kontent.ai clients."""

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import ConfigurationError

DEFAULT_MANAGEMENT_URL = "https://manage.kontent.ai/v2"
DEFAULT_DELIVERY_URL = "https://deliver.kontent.ai"
DEFAULT_PREVIEW_URL = "https://preview-deliver.kontent.ai"


@dataclass
class KontentConfig:
    """Connection settings for one Kontent.ai environment."""
    environment_id: str = ""
    management_api_key: Optional[str] = None
    preview_api_key: Optional[str] = None
    delivery_api_key: Optional[str] = None

    management_url: str = DEFAULT_MANAGEMENT_URL
    delivery_url: str = DEFAULT_DELIVERY_URL
    preview_url: str = DEFAULT_PREVIEW_URL

    # Request pacing
    rate_limit: float = 10.0  # Requests per second
    max_retries: int = 3
    backoff_factor: float = 2.0
    timeout: int = 30

    # Item migration
    item_delay: float = 0.2  # Seconds between migrated items
    language: str = "default"

    @classmethod
    def from_env(cls) -> "KontentConfig":
        """Load configuration from environment variables."""
        return cls(
            environment_id=(
                os.getenv("KONTENT_ENVIRONMENT_ID")
                or os.getenv("KONTENT_PROJECT_ID", "")
            ),
            management_api_key=os.getenv("KONTENT_MANAGEMENT_API_KEY"),
            preview_api_key=os.getenv("KONTENT_PREVIEW_API_KEY"),
            delivery_api_key=os.getenv("KONTENT_DELIVERY_API_KEY"),
            management_url=os.getenv("KONTENT_MANAGEMENT_URL", DEFAULT_MANAGEMENT_URL),
            delivery_url=os.getenv("KONTENT_DELIVERY_URL", DEFAULT_DELIVERY_URL),
            preview_url=os.getenv("KONTENT_PREVIEW_URL", DEFAULT_PREVIEW_URL),
            rate_limit=float(os.getenv("KONTENT_RATE_LIMIT", "10")),
            item_delay=float(os.getenv("KONTENT_ITEM_DELAY", "0.2")),
            language=os.getenv("KONTENT_LANGUAGE", "default"),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KontentConfig":
        """Create from dictionary representation."""
        return cls(
            environment_id=data.get("environment_id") or data.get("project_id", ""),
            management_api_key=data.get("management_api_key"),
            preview_api_key=data.get("preview_api_key"),
            delivery_api_key=data.get("delivery_api_key"),
            management_url=data.get("management_url", DEFAULT_MANAGEMENT_URL),
            delivery_url=data.get("delivery_url", DEFAULT_DELIVERY_URL),
            preview_url=data.get("preview_url", DEFAULT_PREVIEW_URL),
            rate_limit=data.get("rate_limit", 10.0),
            max_retries=data.get("max_retries", 3),
            backoff_factor=data.get("backoff_factor", 2.0),
            timeout=data.get("timeout", 30),
            item_delay=data.get("item_delay", 0.2),
            language=data.get("language", "default"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation. API keys are never included."""
        return {
            "environment_id": self.environment_id,
            "management_url": self.management_url,
            "delivery_url": self.delivery_url,
            "preview_url": self.preview_url,
            "rate_limit": self.rate_limit,
            "max_retries": self.max_retries,
            "backoff_factor": self.backoff_factor,
            "timeout": self.timeout,
            "item_delay": self.item_delay,
            "language": self.language,
        }

    def status(self) -> Dict[str, bool]:
        """Report which connection settings are present."""
        return {
            "has_environment_id": bool(self.environment_id),
            "has_management_api_key": bool(self.management_api_key),
            "has_preview_api_key": bool(self.preview_api_key),
            "is_configured": bool(self.environment_id and self.management_api_key),
        }

    def validate(self) -> None:
        """Raise ConfigurationError unless the management API can be used."""
        missing = []
        if not self.environment_id:
            missing.append("KONTENT_ENVIRONMENT_ID")
        if not self.management_api_key:
            missing.append("KONTENT_MANAGEMENT_API_KEY")
        if missing:
            raise ConfigurationError(f"Missing configuration: {', '.join(missing)}")
