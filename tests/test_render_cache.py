from storefront.core.render_cache import RenderCacheInvalidator


def test_revalidate_dedupes_and_notifies_listeners():
    cache = RenderCacheInvalidator()
    seen = []
    cache.subscribe(seen.append)

    result = cache.revalidate(["/shop", " /shop ", "", "/dashboard"])

    assert result == ["/shop", "/dashboard"]
    assert seen == [["/shop", "/dashboard"]]
    assert cache.recent_paths == ["/shop", "/dashboard"]


def test_nothing_to_revalidate():
    cache = RenderCacheInvalidator()
    seen = []
    cache.subscribe(seen.append)

    assert cache.revalidate(["", "  "]) == []
    assert seen == []


def test_history_is_bounded():
    cache = RenderCacheInvalidator(history_size=2)
    cache.revalidate(["/a", "/b", "/c"])

    assert cache.recent_paths == ["/b", "/c"]
