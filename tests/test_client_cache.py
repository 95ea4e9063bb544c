import pytest

from client.cache import TTLCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return TTLCache(default_ttl=60, clock=clock)


def test_key_ignores_param_order():
    assert TTLCache.make_key("spaces", {"a": 1, "b": 2}) == TTLCache.make_key("spaces", {"b": 2, "a": 1})
    assert TTLCache.make_key("spaces") != TTLCache.make_key("locations")


def test_entries_expire(cache, clock):
    cache.set("k", "v")
    assert cache.get("k") == "v"

    clock.advance(59)
    assert cache.get("k") == "v"
    clock.advance(1)
    assert cache.get("k") is None
    assert len(cache) == 0


def test_per_entry_ttl_and_cleanup(cache, clock):
    cache.set("short", 1, ttl=5)
    cache.set("long", 2)
    clock.advance(10)

    assert cache.cleanup() == 1
    assert cache.stats() == {"size": 1, "keys": ["long"]}


def test_invalidate_pattern(cache):
    cache.set(TTLCache.make_key("bookings", {"scope": "mine"}), [])
    cache.set(TTLCache.make_key("bookings", {"space_id": 1}), [])
    cache.set(TTLCache.make_key("spaces"), [])

    cache.invalidate_pattern("bookings")
    assert cache.stats()["keys"] == [TTLCache.make_key("spaces")]

    cache.clear()
    assert len(cache) == 0


def test_get_or_load_calls_loader_once_per_ttl(cache, clock):
    calls = []

    def loader():
        calls.append(1)
        return len(calls)

    assert cache.get_or_load("spaces", loader, {"city": "Milano"}) == 1
    assert cache.get_or_load("spaces", loader, {"city": "Milano"}) == 1
    assert cache.get_or_load("spaces", loader, {"city": "Roma"}) == 2

    clock.advance(61)
    assert cache.get_or_load("spaces", loader, {"city": "Milano"}) == 3


def test_cached_falsy_values_are_hits(cache):
    calls = []
    cache.get_or_load("empty", lambda: calls.append(1) or [])
    cache.get_or_load("empty", lambda: calls.append(1) or [])
    assert len(calls) == 1


def test_loader_errors_are_not_cached(cache):
    def broken():
        raise RuntimeError("down")

    with pytest.raises(RuntimeError):
        cache.get_or_load("spaces", broken)
    assert cache.get_or_load("spaces", lambda: "ok") == "ok"
