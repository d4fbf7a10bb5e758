"""
Tests for the guard's in-memory traffic counters.
"""

from src.proxy.guard import TrafficCounters, is_exempt


def test_fingerprint_tracking_is_bounded():
    counters = TrafficCounters(max_fingerprints=100)
    for i in range(5000):
        counters.record_request(f"{i:016x}")
    assert counters.total_requests == 5000
    assert len(counters.fingerprints) == 100
    # Oldest entries are evicted first
    assert f"{4999:016x}" in counters.fingerprints
    assert f"{0:016x}" not in counters.fingerprints


def test_repeat_fingerprint_refreshes_recency():
    counters = TrafficCounters(max_fingerprints=2)
    counters.record_request("a")
    counters.record_request("b")
    counters.record_request("a")
    counters.record_request("c")
    assert list(counters.fingerprints) == ["a", "c"]


def test_requests_per_second():
    counters = TrafficCounters()
    for _ in range(20):
        counters.record_request("a")
    assert counters.requests_per_second == 2.0


def test_is_exempt():
    assert is_exempt("/api/health")
    assert is_exempt("/api/docs/oauth2-redirect")
    assert not is_exempt("/api/fingerprint")
    assert not is_exempt("/api/healthz")
