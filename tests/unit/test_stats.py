"""Tests for collection statistics."""
import asyncio

from brick_collector.state.theme_cache import ThemeNameCache
from brick_collector.stats import sets_frame, summarize_collection
from tests.conftest import CAFE_CORNER, MUSTANG, UCS_FALCON


def test_empty_collection():
    assert summarize_collection([]) == {
        'set_count': 0, 'total_parts': 0, 'parts_by_theme': {}, 'sets_by_year': {},
    }


def test_totals_with_theme_labels(memory_store, resolver):
    themes = ThemeNameCache(memory_store, resolver)
    asyncio.run(themes.resolve_missing([UCS_FALCON, CAFE_CORNER]))

    summary = summarize_collection([UCS_FALCON, MUSTANG, CAFE_CORNER], themes)

    assert summary['set_count'] == 3
    assert summary['total_parts'] == 7541 + 1471 + 2056
    # 673 was never resolved, so it shows with the fallback label
    assert summary['parts_by_theme'] == {
        'Ultimate Collector Series': 7541,
        'Modular Buildings': 2056,
        'Theme 673': 1471,
    }
    assert summary['sets_by_year'] == {2007: 1, 2017: 1, 2019: 1}


def test_malformed_records_do_not_break_summary():
    df = sets_frame([{"set_num": "1-1", "num_parts": "many"}, 42, {"set_num": "2-1", "year": "unknown"}])
    assert len(df) == 2
    assert df['num_parts'].tolist() == [0, 0]
    assert summarize_collection([{"set_num": "2-1", "year": "unknown"}])['sets_by_year'] == {}
