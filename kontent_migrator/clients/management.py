"""Kontent.ai Management API client."""

import logging
from typing import Any, Dict, List, Optional

import requests

from .base import BaseKontentClient
from ..config import DEFAULT_MANAGEMENT_URL, KontentConfig
from ..errors import KontentApiError
from ..models.element import ContentTypeInfo

logger = logging.getLogger(__name__)

CONTINUATION_HEADER = "x-continuation"


class ManagementClient(BaseKontentClient):
    """
    Client for the Management API of one environment.

    Used to read content types and language variants and to create content
    types, content items and language variants.
    """

    def __init__(
        self,
        environment_id: str,
        api_key: str,
        base_url: str = DEFAULT_MANAGEMENT_URL,
        rate_limit: float = 10.0,
        max_retries: int = 3,
        backoff_factor: float = 2.0,
        timeout: int = 30,
        session: Optional[requests.Session] = None
    ):
        self.environment_id = environment_id
        super().__init__(
            base_url=f"{base_url.rstrip('/')}/projects/{environment_id}",
            api_key=api_key,
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
    ) -> "ManagementClient":
        """Create a client from configuration. Raises ConfigurationError when incomplete."""
        config.validate()
        return cls(
            environment_id=config.environment_id,
            api_key=config.management_api_key,
            base_url=config.management_url,
            rate_limit=config.rate_limit,
            max_retries=config.max_retries,
            backoff_factor=config.backoff_factor,
            timeout=config.timeout,
            session=session,
        )

    def _list_paginated(self, path: str, data_field: str) -> List[Dict[str, Any]]:
        """Collect all pages of a listing, following the continuation token."""
        results = []
        continuation = None

        while True:
            headers = {CONTINUATION_HEADER: continuation} if continuation else None
            data = self._get_json(path, headers=headers)
            results.extend(data.get(data_field) or [])

            continuation = (data.get("pagination") or {}).get("continuation_token")
            if not continuation:
                break

        return results

    # Content types

    def list_content_types(self) -> List[ContentTypeInfo]:
        types = self._list_paginated("/types", "types")
        logger.info(f"Fetched {len(types)} content types from {self.environment_id}")
        return [ContentTypeInfo.from_api(t) for t in types]

    def get_content_type(self, codename: str) -> ContentTypeInfo:
        data = self._get_json(f"/types/codename/{codename}")
        return ContentTypeInfo.from_api(data)

    def content_type_exists(self, codename: str) -> bool:
        try:
            self.get_content_type(codename)
            return True
        except KontentApiError as e:
            if e.status_code == 404:
                return False
            raise

    def add_content_type(
        self,
        content_type: ContentTypeInfo,
        include_content_groups: bool = False
    ) -> ContentTypeInfo:
        """Create a content type from the definition of another environment's type."""
        payload = content_type.to_api_payload(include_content_groups=include_content_groups)
        response = self._request("POST", "/types", json=payload)
        logger.info(f"Created content type {content_type.codename}")
        return ContentTypeInfo.from_api(response.json())

    # Languages

    def list_languages(self) -> List[Dict[str, Any]]:
        return self._list_paginated("/languages", "languages")

    # Content items and variants

    def get_language_variant(self, item_id: str, language_codename: str = "default") -> Dict[str, Any]:
        """Raw language variant: ``item``, ``language`` and ``elements`` references."""
        return self._get_json(f"/items/{item_id}/variants/codename/{language_codename}")

    def add_content_item(self, name: str, type_codename: str) -> Dict[str, Any]:
        response = self._request(
            "POST",
            "/items",
            json={"name": name, "type": {"codename": type_codename}},
        )
        item = response.json()
        logger.debug(f"Created content item {item.get('id')} ({name})")
        return item

    def upsert_language_variant(
        self,
        item_id: str,
        language_id: str,
        elements: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        response = self._request(
            "PUT",
            f"/items/{item_id}/variants/{language_id}",
            json={"elements": elements},
        )
        return response.json() if response.content else {}

    def test_connection(self) -> bool:
        """Check that the environment is reachable with the configured key."""
        try:
            self._get_json("")
            return True
        except KontentApiError as e:
            logger.warning(f"Connection test failed for {self.environment_id}: {e}")
            return False
