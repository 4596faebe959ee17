"""Back-matter trimming for article bodies."""

import re
from typing import Iterable, Optional, Pattern, Sequence

# Section headings after which an article body holds no main text.
BACK_MATTER_HEADINGS = (
    "Acknowledgments",
    "Acknowledgements",
    "Data accessibility",
    "Funding statement",
    "Ethics",
    "Authors' contributions",
    "Competing interests",
    "Funding",
    "References",
    "Supplementary Material",
)


def _heading_re(heading: str) -> Pattern:
    # The heading must be a line of its own, optionally followed by a colon.
    return re.compile(rf"^[ \t]*{re.escape(heading)}[ \t]*:?[ \t\r]*$", re.MULTILINE)


def find_back_matter(body: str, headings: Iterable[str] = BACK_MATTER_HEADINGS) -> Optional[int]:
    """Return the offset of the earliest line holding only a back-matter heading, if any."""
    matches = [_heading_re(heading).search(body) for heading in headings]
    positions = [m.start() for m in matches if m]
    if not positions:
        return None
    return min(positions)


def trim_back_matter(body: str, headings: Sequence[str] = BACK_MATTER_HEADINGS) -> str:
    """Cut the body at the earliest back-matter heading.

    A heading counts only when it fills a whole line, matched literally and
    case-sensitively, so "References to earlier work..." in running text
    does not truncate the body.
    """
    cut = find_back_matter(body, headings)
    if cut is None:
        return body
    return body[:cut].rstrip()


def word_count(body: str) -> int:
    """Count whitespace-separated words."""
    return len(body.split())
