from vocabtrend.analysis import normalize_article, normalize_body
from vocabtrend.models import Article


def test_removes_parenthetical_citations_and_numbers() -> None:
    text = "Seen before (Smith 2010) in [3] many 42 cases."
    assert normalize_body(text) == "Seen before in many cases."


def test_bracket_span_is_replaced_by_a_space() -> None:
    assert normalize_body("word[12]next") == "word next"


def test_lone_punctuation_left_by_a_number_is_removed() -> None:
    assert normalize_body("found in 2010 . The") == "found in The"


def test_parentheses_are_not_nesting_aware() -> None:
    assert normalize_body("x (a (b) c) y") == "x c) y"


def test_letters_orphaned_by_digit_removal_are_removed() -> None:
    assert normalize_body("the 16S rRNA") == "the rRNA"
    assert normalize_body("the 16S rRNA gene and 3D model") == "the rRNA gene and model"


def test_single_characters_between_spaces_are_removed() -> None:
    assert normalize_body("in a lab") == "in lab"
    # only characters bounded by spaces on both sides
    assert normalize_body("a b c") == "a c"


def test_output_has_no_digits_or_double_spaces() -> None:
    text = "Between 1990 and 2000  (see [4], [5]) rates rose 3-fold (p < 0.05) ."
    cleaned = normalize_body(text)
    assert not any(ch.isdigit() for ch in cleaned)
    assert "  " not in cleaned
    assert "(" not in cleaned and "[" not in cleaned


def test_normalizing_twice_changes_nothing() -> None:
    samples = [
        "Seen before (Smith 2010) in [3] many 42 cases.",
        "in 2010 . 2011 , and - then",
        "x (a (b) c) y  [z]",
        "",
    ]
    for text in samples:
        once = normalize_body(text)
        assert normalize_body(once) == once


def test_normalize_article_returns_a_new_article() -> None:
    article = Article(id="x", year=2001, journal="J", body="Rates (Doe 1999) rose.")
    cleaned = normalize_article(article)

    assert cleaned.body == "Rates rose."
    assert article.body == "Rates (Doe 1999) rose."
    assert cleaned.id == article.id and cleaned.year == article.year
