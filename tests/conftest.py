"""
Shared fixtures for otp_core tests.
"""

import asyncio
import re
from typing import Callable, List, Optional

import pytest

from otp_core.config import OTPConfig
from otp_core.gateway.base import DeliveryGateway, DeliveryResult
from otp_core.otp.engine import OTPEngine
from otp_core.otp.store import ChallengeStore
from otp_core.rate_limit import IssuanceRateLimiter

RECIPIENT = "85512345678"
START = 1_700_000_000.0


class ManualHandle:
    def __init__(self, delay: float, callback: Callable[[], None]):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        """Run the callback even if cancelled, as a timer racing a cancel would."""
        self.callback()


class ManualScheduler:
    """Scheduler whose timers only fire when a test says so."""

    def __init__(self):
        self.handles: List[ManualHandle] = []

    def schedule(self, delay: float, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(delay, callback)
        self.handles.append(handle)
        return handle

    def fire_pending(self) -> None:
        for handle in list(self.handles):
            if not handle.cancelled:
                handle.fire()


class FakeClock:
    def __init__(self, now: float = START):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeGateway(DeliveryGateway):
    """Records messages and answers with a canned result."""

    name = "fake"

    def __init__(
        self,
        success: bool = True,
        error_message: Optional[str] = None,
        delay: float = 0.0,
        exc: Optional[Exception] = None,
    ):
        super().__init__()
        self.success = success
        self.error_message = error_message
        self.delay = delay
        self.exc = exc
        self.sent: List[tuple] = []

    def last_code(self) -> str:
        """The code from the most recent message."""
        return re.search(r"code is: (\S+?)\.", self.sent[-1][1]).group(1)

    async def send(self, recipient: str, message: str) -> DeliveryResult:
        self.sent.append((recipient, message))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.exc is not None:
            raise self.exc
        if self.success:
            return DeliveryResult(success=True, status_code=200)
        return DeliveryResult(success=False, status_code=400, error_message=self.error_message)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def store(scheduler):
    return ChallengeStore(scheduler=scheduler)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def make_engine(store, clock):
    """Build an engine sharing the test's store and clock."""

    def _make(gateway: DeliveryGateway, **config_overrides) -> OTPEngine:
        config = OTPConfig(**config_overrides)
        return OTPEngine(
            gateway=gateway,
            config=config,
            store=store,
            rate_limiter=IssuanceRateLimiter(min_interval=config.rate_limit_seconds),
            clock=clock,
        )

    return _make
