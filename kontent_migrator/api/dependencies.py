"""Request dependencies: configuration and Kontent.ai clients."""

from fastapi import Depends

from ..clients import DeliveryClient, ManagementClient
from ..config import KontentConfig
from ..type_migrator import ContentTypeMigrator


def get_config() -> KontentConfig:
    return KontentConfig.from_env()


def get_management_client(config: KontentConfig = Depends(get_config)) -> ManagementClient:
    # Raises ConfigurationError, answered with 400 by the app's handler
    return ManagementClient.from_config(config)


def get_delivery_client(config: KontentConfig = Depends(get_config)) -> DeliveryClient:
    return DeliveryClient.from_config(config)


def get_type_migrator() -> ContentTypeMigrator:
    return ContentTypeMigrator()
