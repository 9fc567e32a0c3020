"""
OTP Core Configuration
======================
Configuration for the OTP engine and the PlasGate SMS gateway.
"""

import os
from dataclasses import dataclass

from .exceptions import ConfigurationError

DEFAULT_MESSAGE_TEMPLATE = (
    "Your {app_name} verification code is: {code}. "
    "Do not share this code with anyone."
)


@dataclass
class OTPConfig:
    """Configuration for OTP issuance and verification."""
    length: int = 6
    ttl_seconds: float = 300.0  # 5 minutes
    max_attempts: int = 3
    rate_limit_seconds: float = 60.0  # Min time between OTPs
    delivery_timeout: float = 10.0
    app_name: str = "YourApp"
    message_template: str = DEFAULT_MESSAGE_TEMPLATE

    @classmethod
    def from_env(cls) -> "OTPConfig":
        """Build a config from OTP_* environment variables."""
        config = cls(
            length=int(os.getenv("OTP_LENGTH", "6")),
            ttl_seconds=float(os.getenv("OTP_TTL_SECONDS", "300")),
            max_attempts=int(os.getenv("OTP_MAX_ATTEMPTS", "3")),
            rate_limit_seconds=float(os.getenv("OTP_RATE_LIMIT_SECONDS", "60")),
            delivery_timeout=float(os.getenv("OTP_DELIVERY_TIMEOUT", "10")),
            app_name=os.getenv("OTP_APP_NAME", "YourApp"),
            message_template=os.getenv("OTP_MESSAGE_TEMPLATE", DEFAULT_MESSAGE_TEMPLATE),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """
        Check that every numeric setting is usable.

        Raises:
            ConfigurationError: On the first invalid value
        """
        if self.length < 1:
            raise ConfigurationError(f"OTP length must be positive, got {self.length}")
        if self.ttl_seconds <= 0:
            raise ConfigurationError(f"OTP TTL must be positive, got {self.ttl_seconds}")
        if self.max_attempts < 1:
            raise ConfigurationError(f"Max attempts must be positive, got {self.max_attempts}")
        if self.rate_limit_seconds < 0:
            raise ConfigurationError(
                f"Rate limit interval cannot be negative, got {self.rate_limit_seconds}"
            )
        if self.delivery_timeout <= 0:
            raise ConfigurationError(
                f"Delivery timeout must be positive, got {self.delivery_timeout}"
            )

    def render_message(self, code: str) -> str:
        """Render the SMS body for a code."""
        return self.message_template.format(app_name=self.app_name, code=code)


@dataclass
class PlasGateConfig:
    """Configuration for the PlasGate SMS API."""
    private_key: str = ""
    secret: str = ""
    sender: str = "YourSenderName"
    base_url: str = "https://cloudapi.plasgate.com"
    timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "PlasGateConfig":
        """Build a config from PLASGATE_* environment variables."""
        return cls(
            private_key=os.getenv("PLASGATE_PRIVATE_KEY", ""),
            secret=os.getenv("PLASGATE_SECRET", ""),
            sender=os.getenv("PLASGATE_SENDER", "YourSenderName"),
            base_url=os.getenv("PLASGATE_BASE_URL", "https://cloudapi.plasgate.com"),
            timeout=float(os.getenv("PLASGATE_TIMEOUT", "10")),
        )
