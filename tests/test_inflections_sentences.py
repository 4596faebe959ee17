from collections import Counter

from vocabtrend.analysis import (
    TextTokenizer,
    build_inflections,
    export_sentences,
    split_sentences,
    stem_label,
    top_forms,
)
from vocabtrend.analysis.inflections import inflection_table, read_inflection_table

from conftest import make_article

FORMS = Counter(
    {
        ("discord", "discordance"): 3,
        ("discord", "discordant"): 1,
        ("discord", "discord"): 1,
        ("cat", "cats"): 2,
    }
)


def test_forms_are_ordered_by_count_then_surface() -> None:
    table = build_inflections(FORMS, ["discord"])
    assert table == {"discord": [("discordance", 3), ("discord", 1), ("discordant", 1)]}


def test_unknown_stem_has_no_forms() -> None:
    table = build_inflections(FORMS, ["zebra"])
    assert table == {"zebra": []}
    assert stem_label(table, "zebra") == "zebra"


def test_stem_label_lists_endings() -> None:
    table = build_inflections(FORMS, ["discord"])
    assert top_forms(table, "discord", 2) == ["discordance", "discord"]
    assert stem_label(table, "discord") == "discord[ance/ant]"


def test_inflection_table_reads_back() -> None:
    table = build_inflections(FORMS, ["discord", "cat"])
    frame = inflection_table(table)

    assert list(frame.columns) == ["stem", "surface_form", "count"]
    assert read_inflection_table(frame) == table


def test_split_sentences() -> None:
    assert split_sentences("First one here. Second one there.") == ["First one here.", "Second one there."]


def test_export_matches_whole_surface_forms() -> None:
    tokenizer = TextTokenizer()
    articles = [
        make_article("a", 2001, "The signal was discordant. Nothing here. It behaved discordantly."),
        make_article("b", 2003, "Discordance rose. Cats slept."),
    ]
    inflections = build_inflections(FORMS, ["discord", "cat"])
    frame = export_sentences(articles, inflections, ["discord", "cat"], tokenizer)

    assert list(frame.columns) == ["stem", "year", "sentence"]
    assert list(frame["stem"]) == ["discord", "discord", "cat"]
    assert list(frame["sentence"]) == ["The signal was discordant.", "Discordance rose.", "Cats slept."]
    assert list(frame["year"]) == [2001, 2003, 2003]


def test_export_skips_stems_without_forms() -> None:
    articles = [make_article("a", 2001, "Nothing to see.")]
    frame = export_sentences(articles, {}, ["ghost"])
    assert frame.empty
