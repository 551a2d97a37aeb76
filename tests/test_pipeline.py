from fakes import FakeMarketData, FakeNotifier, FakeSource
from recap.market.client import MarketDataClient
from recap.market.scheduler import RateLimitedFetcher
from recap.models import Subscription
from recap.notifications.dispatch import Dispatcher
from recap.pipeline import RecapPipeline


def _pipeline(subscriptions, provider, notifier, fake_clock, fixed_now, source_error=None):
    client = MarketDataClient(provider, now=lambda: fixed_now)
    fetcher = RateLimitedFetcher(client, delay_seconds=1.0, clock=fake_clock, sleep=fake_clock.sleep)
    dispatcher = Dispatcher(notifier, now=lambda: fixed_now)
    return RecapPipeline(FakeSource(subscriptions, error=source_error), fetcher, dispatcher)


def _sent_to(notifier, email):
    return [body for to, _, body in notifier.sent if to == email]


def test_shared_ticker_fetched_once(scenario_subscriptions, fake_clock, fixed_now):
    provider = FakeMarketData()
    notifier = FakeNotifier()
    summary = _pipeline(scenario_subscriptions, provider, notifier, fake_clock, fixed_now).run()

    assert sorted(provider.tickers_queried("quote")) == ["AAPL", "TSLA"]
    assert len(provider.tickers_queried("daily_series")) == 2
    assert len(provider.tickers_queried("news")) == 2
    (body_a,) = _sent_to(notifier, "a@example.com")
    (body_b,) = _sent_to(notifier, "b@example.com")
    assert body_a.count("<h2") == 1
    assert body_b.count("<h2") == 2
    assert summary.users_considered == 2
    assert summary.users_dispatched == 2
    assert summary.tickers_fetched == 2
    assert summary.tickers_failed == 0


def test_failed_ticker_dropped_from_digests(scenario_subscriptions, fake_clock, fixed_now):
    provider = FakeMarketData(failing={"AAPL": "quote"})
    notifier = FakeNotifier()
    summary = _pipeline(scenario_subscriptions, provider, notifier, fake_clock, fixed_now).run()

    assert notifier.attempts == ["b@example.com"]
    (body_b,) = _sent_to(notifier, "b@example.com")
    assert "TSLA" in body_b
    assert "AAPL" not in body_b
    assert summary.tickers_fetched == 1
    assert summary.tickers_failed == 1
    assert summary.users_skipped_empty == 1
    assert summary.users_dispatched == 1


def test_unresolvable_user_never_contacted(scenario_subscriptions, fake_clock, fixed_now):
    subs = scenario_subscriptions + [Subscription("user-c", "NVDA", "holding", None)]
    provider = FakeMarketData()
    notifier = FakeNotifier()
    summary = _pipeline(subs, provider, notifier, fake_clock, fixed_now).run()

    assert "NVDA" not in provider.tickers_queried("quote")
    assert sorted(notifier.attempts) == ["a@example.com", "b@example.com"]
    assert summary.users_considered == 2
    assert summary.rows_dropped == 1


def test_send_failure_does_not_stop_run(scenario_subscriptions, fake_clock, fixed_now):
    subs = scenario_subscriptions + [Subscription("user-d", "MSFT", "holding", "d@example.com")]
    notifier = FakeNotifier(failing={"b@example.com"})
    summary = _pipeline(subs, FakeMarketData(), notifier, fake_clock, fixed_now).run()

    assert notifier.attempts == ["a@example.com", "b@example.com", "d@example.com"]
    assert summary.sends_failed == 1
    assert summary.users_dispatched == 2


def test_subscription_read_failure_ends_run_quietly(fake_clock, fixed_now, capsys):
    notifier = FakeNotifier()
    provider = FakeMarketData()
    summary = _pipeline([], provider, notifier, fake_clock, fixed_now, source_error=ConnectionError("db down")).run()
    assert provider.calls == []
    assert notifier.attempts == []
    assert summary.users_considered == 0
    assert "Error fetching tickers and users" in capsys.readouterr().out
