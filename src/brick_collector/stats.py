"""
Collection statistics.

Summaries are computed with pandas over the raw set records; records that
are not objects, or that lack a field, are counted with neutral values.
"""

from typing import Any, Dict, List, Optional

import pandas as pd

from brick_collector.features.set_schema import num_parts
from brick_collector.state.theme_cache import ThemeNameCache


def sets_frame(sets: List[Any], themes: Optional[ThemeNameCache] = None) -> pd.DataFrame:
    """One row per set record with set_num, name, year, num_parts and theme label."""
    rows = []
    for record in sets:
        if not isinstance(record, dict):
            continue
        theme_id = record.get('theme_id')
        rows.append({
            'set_num': record.get('set_num'),
            'name': record.get('name'),
            'year': record.get('year'),
            'num_parts': num_parts(record),
            'theme': themes.label(theme_id) if themes is not None and theme_id is not None else None,
        })
    return pd.DataFrame(rows, columns=['set_num', 'name', 'year', 'num_parts', 'theme'])


def summarize_collection(sets: List[Any], themes: Optional[ThemeNameCache] = None) -> Dict[str, Any]:
    """
    Totals for one collection.

    Returns:
        dict with set_count, total_parts, parts_by_theme and sets_by_year
    """
    df = sets_frame(sets, themes)
    if df.empty:
        return {'set_count': 0, 'total_parts': 0, 'parts_by_theme': {}, 'sets_by_year': {}}

    parts_by_theme = (
        df.dropna(subset=['theme'])
        .groupby('theme')['num_parts'].sum()
        .sort_values(ascending=False)
    )
    years = pd.to_numeric(df['year'], errors='coerce').dropna().astype(int)
    sets_by_year = years.value_counts().sort_index()

    return {
        'set_count': int(len(df)),
        'total_parts': int(df['num_parts'].sum()),
        'parts_by_theme': {str(k): int(v) for k, v in parts_by_theme.items()},
        'sets_by_year': {int(k): int(v) for k, v in sets_by_year.items()},
    }
