"""
Tests for the token bucket rate limiter.
"""

from stream_avatar.security import TokenBucket


def test_burst_then_limited():
    bucket = TokenBucket(rps=0.1, burst=3)
    assert [bucket.allow("ip") for _ in range(4)] == [True, True, True, False]


def test_keys_are_independent():
    bucket = TokenBucket(rps=0.1, burst=1)
    assert bucket.allow("a")
    assert not bucket.allow("a")
    assert bucket.allow("b")


def test_refills_over_time():
    bucket = TokenBucket(rps=1.0, burst=1)
    assert bucket.allow("a")
    assert not bucket.allow("a")
    bucket.clients["a"].seen -= 1.5
    assert bucket.allow("a")


def test_prune_drops_only_refilled_clients():
    bucket = TokenBucket(rps=1.0, burst=5)
    bucket.allow("old")
    bucket.allow("recent")
    bucket.clients["old"].seen -= 6
    bucket.clients["recent"].seen -= 2

    assert bucket.prune() == 1
    assert list(bucket.clients) == ["recent"]


def test_allow_sweeps_stale_clients():
    bucket = TokenBucket(rps=1.0, burst=2, sweep_every=10.0)
    for i in range(50):
        bucket.allow(f"10.0.0.{i}")
        bucket.clients[f"10.0.0.{i}"].seen -= 30

    bucket.allow("10.0.1.1")
    assert len(bucket.clients) == 51

    bucket._last_sweep -= 10
    bucket.allow("10.0.1.2")
    assert set(bucket.clients) == {"10.0.1.1", "10.0.1.2"}
