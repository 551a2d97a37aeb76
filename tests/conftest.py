from datetime import datetime, timezone

import pytest

from fakes import FakeClock
from recap.models import Subscription


@pytest.fixture
def fixed_now():
    return datetime(2025, 10, 17, 21, 0, tzinfo=timezone.utc)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def scenario_subscriptions():
    return [
        Subscription("user-a", "aapl", "watchlist", "a@example.com"),
        Subscription("user-b", "AAPL", "holding", "b@example.com"),
        Subscription("user-b", "tsla", "watchlist", "b@example.com"),
    ]
