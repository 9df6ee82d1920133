"""Clients for the Kontent.ai Management and Delivery APIs."""

from .base import BaseKontentClient
from .management import ManagementClient
from .delivery import DeliveryClient

__all__ = [
    "BaseKontentClient",
    "ManagementClient",
    "DeliveryClient",
]
