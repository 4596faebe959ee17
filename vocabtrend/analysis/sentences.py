"""Sentence export for qualitative review of trending stems."""

from typing import Iterable, List, Optional, Sequence

import pandas as pd
from nltk.tokenize.punkt import PunktSentenceTokenizer

from ..models import Article
from .models import InflectionTable
from .tokenizer import TextTokenizer

SENTENCE_COLUMNS = ["stem", "year", "sentence"]


def split_sentences(text: str) -> List[str]:
    """Split text into sentences with an untrained Punkt tokenizer."""
    return [s.strip() for s in PunktSentenceTokenizer().tokenize(text) if s.strip()]


def export_sentences(
    articles: Sequence[Article],
    inflections: InflectionTable,
    stems: Iterable[str],
    tokenizer: Optional[TextTokenizer] = None,
) -> pd.DataFrame:
    """
    Every sentence containing a surface form of one of the given stems.

    Args:
        articles: Corpus (normalized bodies)
        inflections: Surface forms per stem
        stems: Stems to export; stems without inflections export nothing

    Returns:
        Rows of (stem, year, sentence), in corpus order per stem
    """
    tokenizer = tokenizer or TextTokenizer()
    targets = {stem: {surface for surface, _ in inflections.get(stem, [])} for stem in stems}
    targets = {stem: forms for stem, forms in targets.items() if forms}

    rows = []
    for article in articles:
        for sentence in split_sentences(article.body):
            words = set(tokenizer.words(sentence))
            for stem, forms in targets.items():
                if words & forms:
                    rows.append({"stem": stem, "year": article.year, "sentence": sentence})

    frame = pd.DataFrame(rows, columns=SENTENCE_COLUMNS)
    if frame.empty:
        return frame
    order = {stem: i for i, stem in enumerate(targets)}
    frame["_order"] = frame["stem"].map(order)
    return frame.sort_values("_order", kind="stable").drop(columns="_order").reset_index(drop=True)
