import json
from pathlib import Path

import pandas as pd
import pytest

from vocabtrend.config import ArticleException, CorpusConfig
from vocabtrend.errors import EmptyCorpusError, IngestionError
from vocabtrend.ingestion import ExceptionList, load_corpus, read_snapshot, trim_back_matter, validate_record

GOOD = {"id": "https://doi.org/10.1/a", "year": 2001, "journal": "Proc B", "title": "A", "body": "Birds sing."}


def _write_jsonl(path: Path, records) -> Path:
    with open(path, "w") as f:
        for record in records:
            f.write(json.dumps(record) + "\n")
    return path


def test_validate_record() -> None:
    article = validate_record(dict(GOOD, year="2001", title=None))
    assert article.year == 2001
    assert article.title == ""


def test_validate_record_reports_the_problem() -> None:
    with pytest.raises(IngestionError) as excinfo:
        validate_record(dict(GOOD, body="   "))
    assert excinfo.value.record_id == GOOD["id"]
    assert "body" in str(excinfo.value)


def test_year_outside_window_is_rejected() -> None:
    with pytest.raises(IngestionError):
        validate_record(dict(GOOD, year=2010), min_year=1900, max_year=2005)


def test_load_corpus_drops_bad_records_and_sorts(tmp_path: Path) -> None:
    path = _write_jsonl(
        tmp_path / "corpus.jsonl",
        [
            dict(GOOD, id="z", year=2003),
            dict(GOOD, id="b", year=2001),
            dict(GOOD, id="a", year=2001),
            dict(GOOD, id="a", year=2002),
            dict(GOOD, id="c", year="not a year"),
            {"id": "d", "year": 2001, "journal": "Proc B"},
        ],
    )
    articles, report = load_corpus(path)

    assert [(a.year, a.id) for a in articles] == [(2001, "a"), (2001, "b"), (2003, "z")]
    assert report.total_records == 6
    assert report.accepted == 3
    assert report.dropped_count == 3
    assert {d.reason for d in report.dropped if d.record_id == "a"} == {"duplicate article id"}


def test_json_and_csv_snapshots_with_aliases(tmp_path: Path) -> None:
    json_path = tmp_path / "corpus.json"
    json_path.write_text(json.dumps({"articles": [GOOD]}))
    csv_path = tmp_path / "corpus.csv"
    pd.DataFrame([{"Link": "x", "Year": "2004", "Journal": "J", "Title": "", "Text": "Some text."}]).to_csv(
        csv_path, index=False
    )

    assert read_snapshot(json_path) == [GOOD]
    articles, _ = load_corpus(csv_path)
    assert articles[0].id == "x"
    assert articles[0].year == 2004
    assert articles[0].body == "Some text."


def test_unsupported_snapshot_format(tmp_path: Path) -> None:
    path = tmp_path / "corpus.txt"
    path.write_text("nothing")
    with pytest.raises(ValueError):
        read_snapshot(path)


def test_empty_corpus_raises(tmp_path: Path) -> None:
    path = _write_jsonl(tmp_path / "corpus.jsonl", [dict(GOOD, body="")])
    with pytest.raises(EmptyCorpusError):
        load_corpus(path)


def test_exception_list_corrects_and_excludes(tmp_path: Path) -> None:
    path = _write_jsonl(
        tmp_path / "corpus.jsonl",
        [dict(GOOD, id="keep"), dict(GOOD, id="retracted"), dict(GOOD, id="misdated", year=1700)],
    )
    exceptions = ExceptionList(
        [
            ArticleException(article_id="retracted", action="exclude", reason="retraction"),
            ArticleException(article_id="misdated", action="set_year", value=2005, reason="print date"),
            ArticleException(article_id="misdated", action="set_title", value="Fixed", reason="typo"),
        ]
    )
    articles, report = load_corpus(path, exceptions=exceptions)

    assert len(exceptions) == 3
    assert "retracted" in exceptions
    assert [a.id for a in articles] == ["keep", "misdated"]
    assert articles[1].year == 2005
    assert articles[1].title == "Fixed"
    assert report.corrected == 1
    assert [(e.record_id, e.reason) for e in report.excluded] == [("retracted", "retraction")]


def test_back_matter_trimming_and_minimum_length(tmp_path: Path) -> None:
    path = _write_jsonl(
        tmp_path / "corpus.jsonl",
        [
            dict(GOOD, id="long", body="Main text of the paper goes on.\n\nReferences\n1. Someone."),
            dict(GOOD, id="short", body="Too short."),
        ],
    )
    config = CorpusConfig(trim_back_matter=True, min_body_words=3)
    articles, report = load_corpus(path, config)

    assert [a.body for a in articles] == ["Main text of the paper goes on."]
    assert report.trimmed == 1
    assert report.dropped[0].record_id == "short"


def test_trim_back_matter_is_case_sensitive() -> None:
    body = "We cite references widely.\nFunding\nGrant 1."
    assert trim_back_matter(body) == "We cite references widely."
    assert trim_back_matter("No back matter.") == "No back matter."


def test_heading_words_in_running_text_do_not_trim() -> None:
    body = "Intro.\nReferences to earlier work abound.\nFunding agencies differ.\nMore text."
    assert trim_back_matter(body) == body

    body = "Main text.\n  References:  \n1. Someone."
    assert trim_back_matter(body) == "Main text."
