from app.api.delivery.adapters.cache_adapter import NullCacheAdapter, TTLCacheAdapter


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_ttl_cache_expires_entries():
    clock = FakeClock()
    cache = TTLCacheAdapter(default_ttl=60, clock=clock)

    cache.set("pincode-locality:632001", ["Vellore"])
    assert cache.get("pincode-locality:632001") == ["Vellore"]

    clock.now += 59
    assert cache.has("pincode-locality:632001")

    clock.now += 1
    assert cache.get("pincode-locality:632001") is None
    assert len(cache) == 0


def test_ttl_cache_custom_ttl_and_clear():
    clock = FakeClock()
    cache = TTLCacheAdapter(default_ttl=60, clock=clock)

    cache.set("a", 1, ttl=5)
    cache.set("b", 2)
    clock.now += 10
    assert cache.get("a") is None
    assert cache.get("b") == 2

    cache.set("c", 3)
    cache.clear("b")
    assert cache.get("b") is None
    assert cache.get("c") == 3

    cache.clear()
    assert len(cache) == 0


def test_cached_empty_list_is_a_hit():
    cache = TTLCacheAdapter(default_ttl=60)
    cache.set("pincode-locality:999999", [])
    assert cache.get("pincode-locality:999999") == []


def test_null_cache_never_stores():
    cache = NullCacheAdapter()
    cache.set("a", 1)
    assert cache.get("a") is None
    assert not cache.has("a")
    cache.clear()
