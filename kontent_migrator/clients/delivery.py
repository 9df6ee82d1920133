"""Kontent.ai Delivery API client (preview mode when a preview key is given)."""

import logging
from typing import Any, Dict, List, Optional

import requests

from .base import BaseKontentClient
from ..config import DEFAULT_DELIVERY_URL, DEFAULT_PREVIEW_URL, KontentConfig
from ..errors import ConfigurationError
from ..models.migration import MigrationItem

logger = logging.getLogger(__name__)


class DeliveryClient(BaseKontentClient):
    """
    Reads content items, used to list the items available for migration.

    A preview key selects the Preview API. ``api_key`` is the secured
    access key of the Delivery API, ignored when a preview key is given.
    """

    def __init__(
        self,
        environment_id: str,
        preview_api_key: Optional[str] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        rate_limit: float = 10.0,
        max_retries: int = 3,
        backoff_factor: float = 2.0,
        timeout: int = 30,
        session: Optional[requests.Session] = None
    ):
        self.environment_id = environment_id
        self.use_preview = bool(preview_api_key)
        if base_url is None:
            base_url = DEFAULT_PREVIEW_URL if self.use_preview else DEFAULT_DELIVERY_URL
        super().__init__(
            base_url=f"{base_url.rstrip('/')}/{environment_id}",
            api_key=preview_api_key or api_key,
            rate_limit=rate_limit,
            max_retries=max_retries,
            backoff_factor=backoff_factor,
            timeout=timeout,
            session=session,
        )

    @classmethod
    def from_config(
        cls,
        config: KontentConfig,
        session: Optional[requests.Session] = None
    ) -> "DeliveryClient":
        if not config.environment_id:
            raise ConfigurationError("Missing configuration: KONTENT_ENVIRONMENT_ID")

        return cls(
            environment_id=config.environment_id,
            preview_api_key=config.preview_api_key,
            api_key=config.delivery_api_key,
            base_url=config.preview_url if config.preview_api_key else config.delivery_url,
            rate_limit=config.rate_limit,
            max_retries=config.max_retries,
            backoff_factor=config.backoff_factor,
            timeout=config.timeout,
            session=session,
        )

    def list_items(self, type_codename: str, language: str = "default") -> List[MigrationItem]:
        """
        List items of a content type in a language.

        The Delivery API falls back to other languages for untranslated
        items; those are dropped so only items really in ``language`` remain.
        """
        items = []
        path = "/items"
        params: Optional[Dict[str, Any]] = {"system.type": type_codename, "language": language}

        while path:
            data = self._get_json(path, params=params)
            for raw in data.get("items") or []:
                item = MigrationItem.from_delivery(raw)
                if item.language == language:
                    items.append(item)
                else:
                    logger.debug(f"Skipping {item.name}: language {item.language}, expected {language}")

            # next_page already carries the query
            path = (data.get("pagination") or {}).get("next_page") or ""
            params = None

        logger.info(f"Found {len(items)} {type_codename} items in language {language}")
        return items

    def get_item(self, codename: str, language: str = "default") -> Dict[str, Any]:
        data = self._get_json(f"/items/{codename}", params={"language": language})
        return data.get("item") or {}
