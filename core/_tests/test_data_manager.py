import numpy as np

from core import DataCache, SeriesVolume, SharedDataCache


def _volume(series_id):
    return SeriesVolume(series_id, np.zeros((2, 3, 3), dtype=np.float32))


def test_add_emits_and_preserves_order(qtbot):
    cache = DataCache()
    added = []
    cache.series_added.connect(added.append)

    cache.add(_volume("b"))
    cache.add(_volume("a"))
    cache.add(_volume("b"))

    assert added == ["b", "a", "b"]
    assert cache.series_ids == ["b", "a"]
    assert len(cache) == 2


def test_remove_and_clear(qtbot):
    cache = DataCache()
    cache.add(_volume("a"))

    with qtbot.waitSignal(cache.series_removed, timeout=1000) as blocker:
        assert cache.remove("a") is True
    assert blocker.args == ["a"]
    assert cache.remove("a") is False

    cache.add(_volume("b"))
    with qtbot.waitSignal(cache.cleared, timeout=1000):
        cache.clear()
    assert cache.get("b") is None


def test_shared_cache_is_a_live_read_only_view(qtbot):
    cache = DataCache()
    cache.add(_volume("a"))
    shared = cache.share()

    assert isinstance(shared, SharedDataCache)
    assert shared.get("a").is_read_only
    assert not cache.get("a").is_read_only
    assert shared.get("missing") is None

    cache.add(_volume("b"))
    assert "b" in shared
    assert shared.series_ids == ["a", "b"]


def test_sharing_onward_reads_original_source(qtbot):
    cache = DataCache()
    cache.add(_volume("a"))
    again = cache.share().share()

    cache.add(_volume("c"))
    assert len(again) == 2
    assert not hasattr(again, "add")
