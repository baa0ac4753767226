from blindhire.services.response_cache import ResponseCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_entries_expire_after_ttl():
    clock = FakeClock()
    cache = ResponseCache(default_ttl=30, clock=clock)
    cache.set("jobs:list", [1, 2])

    clock.now += 29
    assert cache.get("jobs:list") == [1, 2]
    clock.now += 1
    assert cache.get("jobs:list") is None
    assert len(cache) == 0


def test_explicit_ttl_overrides_default():
    clock = FakeClock()
    cache = ResponseCache(default_ttl=30, clock=clock)
    cache.set("jobs:detail:1", {"id": 1}, ttl=5)
    clock.now += 6
    assert cache.get("jobs:detail:1") is None


def test_invalidate_by_prefix():
    cache = ResponseCache()
    cache.set("jobs:list", [])
    cache.set("jobs:detail:1", {})
    cache.set("profile:1", {})

    assert cache.invalidate("jobs:") == 2
    assert cache.get("jobs:list") is None
    assert cache.get("profile:1") == {}


def test_clear():
    cache = ResponseCache()
    cache.set("a", 1)
    cache.clear()
    assert cache.get("a") is None
