"""Word tokenization, stop-word removal and stemming."""

import re
from functools import lru_cache
from typing import FrozenSet, Iterable, Iterator, Optional, Tuple

import nltk
from nltk.stem.snowball import SnowballStemmer

from ..models import Article
from .models import ArticleCounts

WORD_RE = re.compile(r"[^\W\d_]+(?:['’][^\W\d_]+)*")


@lru_cache(maxsize=None)
def get_stemmer(language: str = "porter") -> SnowballStemmer:
    """Return a shared Snowball stemmer (``porter`` is the original Porter algorithm)."""
    return SnowballStemmer(language)


def load_stopwords(source: str = "nltk", extra: Optional[Iterable[str]] = None) -> FrozenSet[str]:
    """
    Build the stop-word set.

    Args:
        source: ``nltk`` for the NLTK English list, ``none`` for extras only
        extra: Additional words to drop

    Returns:
        Lower-cased stop words
    """
    words = set()
    if source == "nltk":
        try:
            nltk.data.find("corpora/stopwords")
        except LookupError:
            nltk.download("stopwords", quiet=True)
        from nltk.corpus import stopwords

        words.update(stopwords.words("english"))
    words.update(extra or [])
    return frozenset(w.strip().lower() for w in words if w and w.strip())


class TextTokenizer:
    """Split text into (surface form, stem) pairs."""

    def __init__(self, stopwords: Iterable[str] = (), language: str = "porter") -> None:
        """
        Initialize tokenizer.

        Args:
            stopwords: Words dropped before stemming (case-insensitive)
            language: Snowball stemmer language
        """
        self.stopwords = frozenset(w.lower() for w in stopwords)
        self.language = language

    def stem(self, word: str) -> str:
        """Stem a single lower-case word."""
        return _stem(self.language, word)

    def words(self, text: str) -> Iterator[str]:
        """Yield lower-cased word tokens, stop words included."""
        for match in WORD_RE.finditer(text.lower()):
            yield match.group(0)

    def tokenize(self, text: str) -> Iterator[Tuple[str, str]]:
        """Yield (surface_form, stem) for every non-stop-word token."""
        for word in self.words(text):
            if word in self.stopwords:
                continue
            yield word, self.stem(word)

    def count_article(self, article: Article) -> ArticleCounts:
        """Fold one article's tokens into a partial aggregate."""
        counts = ArticleCounts(article_id=article.id, year=article.year)
        for surface, stem in self.tokenize(article.body):
            counts.total_words += 1
            counts.stems[stem] += 1
            counts.forms[(stem, surface)] += 1
        return counts


@lru_cache(maxsize=200000)
def _stem(language: str, word: str) -> str:
    return get_stemmer(language).stem(word)
