"""Body text cleaning ahead of tokenization."""

import re

from ..models import Article

# Non-greedy and not nesting-aware: "(a (b) c)" loses "(a (b)" and keeps " c)".
PARENTHESES_RE = re.compile(r"\([^)]+\)")
BRACKETS_RE = re.compile(r"\[[^\]]+\]")
DIGITS_RE = re.compile(r"[0-9]")
MULTI_SPACE_RE = re.compile(r" {2,}")
# A lone character between spaces, e.g. the "S" of "16S" once digits are gone.
ORPHAN_CHAR_RE = re.compile(r"(?<= )\S(?= )")


def normalize_body(text: str) -> str:
    """
    Strip citations and numbers from an article body.

    Removes parenthesized spans (in-text citations), replaces square-bracket
    spans (numbered citations) with a space, deletes digits, then tidies the
    double spaces and single characters orphaned by the removals.
    """
    text = PARENTHESES_RE.sub("", text)
    text = BRACKETS_RE.sub(" ", text)
    text = DIGITS_RE.sub("", text)
    text = MULTI_SPACE_RE.sub(" ", text)
    text = ORPHAN_CHAR_RE.sub("", text)
    return MULTI_SPACE_RE.sub(" ", text)


def normalize_article(article: Article) -> Article:
    """Return a copy of the article with a cleaned body."""
    return article.with_body(normalize_body(article.body))
