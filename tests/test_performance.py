"""Tests for the layout cache and timing helpers."""

from concurrent.futures import ThreadPoolExecutor

from smartchart.performance import CacheManager, profiler, time_monitor


def test_cache_evicts_least_recently_used():
    cache = CacheManager(max_entries=2)
    cache.set('a', 1)
    cache.set('b', 2)
    assert cache.get('a') == 1

    cache.set('c', 3)

    assert cache.get('b') is None
    assert cache.get('a') == 1
    assert cache.get('c') == 3
    assert cache.get_stats()['entries_count'] == 2


def test_cache_keys_are_stable_across_dict_order():
    cache = CacheManager()
    first = cache.generate_key('line', {'x': 1, 'y': [1, 2]})
    second = cache.generate_key('line', {'y': [1, 2], 'x': 1})

    assert first == second
    assert first.startswith('line:')
    assert first != cache.generate_key('pie', {'x': 1, 'y': [1, 2]})


def test_cache_clear_by_pattern():
    cache = CacheManager()
    cache.set('line:1', 'a')
    cache.set('pie:1', 'b')

    assert cache.clear('pie') == 1
    assert cache.get('line:1') == 'a'
    assert cache.clear() == 1
    assert cache.get_stats()['entries_count'] == 0


def test_cache_statistics_count_hits_and_misses():
    cache = CacheManager()
    cache.set('k', 'v')
    cache.get('k')
    cache.get('k')
    cache.get('missing')

    stats = cache.get_stats()
    assert stats['total_hits'] == 2
    assert stats['total_misses'] == 1


def test_cache_survives_concurrent_clears():
    """Reads, writes and clears from worker threads never raise."""
    cache = CacheManager(max_entries=8)

    def worker(i):
        key = f"line:{i % 10}"
        cache.set(key, i)
        cache.get(key)
        if i % 3 == 0:
            cache.clear("line")
        cache.get(key)
        return cache.get_stats()["entries_count"]

    with ThreadPoolExecutor(max_workers=8) as executor:
        counts = list(executor.map(worker, range(500)))

    assert all(0 <= count <= 8 for count in counts)


def test_time_monitor_records_execution():
    @time_monitor
    def work():
        return 42

    before = len(profiler.metrics_history)
    assert work() == 42
    assert profiler.metrics_history[-1].function_name == 'work'
    assert len(profiler.metrics_history) == min(before + 1, profiler.history_size)
