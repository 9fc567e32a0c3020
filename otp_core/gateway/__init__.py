"""
OTP Delivery Gateways
=====================
SMS delivery providers for OTP codes.
"""

from .base import DeliveryGateway, DeliveryResult
from .console import ConsoleGateway
from .plasgate import PlasGateGateway

__all__ = [
    "DeliveryGateway",
    "DeliveryResult",
    "ConsoleGateway",
    "PlasGateGateway",
]
