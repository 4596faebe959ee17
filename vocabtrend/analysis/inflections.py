"""Surface forms behind each stem."""

from collections import Counter
from typing import Dict, Iterable, List, Tuple

import pandas as pd

from .models import InflectionTable


def build_inflections(forms: Counter, stems: Iterable[str]) -> InflectionTable:
    """
    Map each stem to its surface forms, most frequent first.

    Args:
        forms: (stem, surface_form) -> occurrences, from the raw token stream
        stems: Stems to index

    Returns:
        stem -> [(surface_form, count), ...] sorted by count descending, then
        surface form
    """
    wanted = list(stems)
    grouped: Dict[str, List[Tuple[str, int]]] = {stem: [] for stem in wanted}
    for (stem, surface), count in forms.items():
        if stem in grouped and count > 0:
            grouped[stem].append((surface, count))
    return {stem: sorted(grouped[stem], key=lambda item: (-item[1], item[0])) for stem in wanted}


def top_forms(table: InflectionTable, stem: str, n: int = 3) -> List[str]:
    """The ``n`` most common surface forms of a stem."""
    return [surface for surface, _ in table.get(stem, [])[:n]]


def stem_label(table: InflectionTable, stem: str, n: int = 3) -> str:
    """Label such as ``discord[ance/ant]`` listing the endings of the top forms."""
    endings = []
    for surface in top_forms(table, stem, n):
        ending = surface[len(stem):] if surface.startswith(stem) else surface
        if ending and ending not in endings:
            endings.append(ending)
    if not endings:
        return stem
    return f"{stem}[{'/'.join(endings)}]"


def inflection_table(table: InflectionTable) -> pd.DataFrame:
    """Rows of (stem, surface_form, count), sorted per stem."""
    return pd.DataFrame(
        [
            {"stem": stem, "surface_form": surface, "count": count}
            for stem, forms in table.items()
            for surface, count in forms
        ],
        columns=["stem", "surface_form", "count"],
    )


def read_inflection_table(frame: pd.DataFrame) -> InflectionTable:
    """Rebuild an inflection table from its row form."""
    table: InflectionTable = {}
    for stem, surface, count in zip(frame["stem"], frame["surface_form"], frame["count"]):
        table.setdefault(str(stem), []).append((str(surface), int(count)))
    return {stem: sorted(forms, key=lambda item: (-item[1], item[0])) for stem, forms in table.items()}
