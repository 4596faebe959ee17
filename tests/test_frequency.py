import numpy as np

from vocabtrend.analysis import FrequencyAggregator, FrequencyTables, corpus_summary

from conftest import make_article


def test_year_table_is_zero_filled(small_tables: FrequencyTables) -> None:
    table = small_tables.year_table()

    assert small_tables.years == [2000, 2001]
    assert small_tables.stems == ["bird", "cat", "dog", "fish"]
    assert len(table) == 4 * 2
    assert (table.groupby("stem").size() == 2).all()

    bird_2000 = table[(table["stem"] == "bird") & (table["year"] == 2000)].iloc[0]
    assert bird_2000["count"] == 0
    assert bird_2000["frequency"] == 0.0


def test_year_frequencies(small_tables: FrequencyTables) -> None:
    table = small_tables.year_table().set_index(["stem", "year"])

    assert table.loc[("cat", 2000), "count"] == 2
    assert table.loc[("cat", 2000), "total_words"] == 5
    assert table.loc[("cat", 2000), "frequency"] == 0.4
    assert table.loc[("cat", 2001), "frequency"] == 0.5
    assert (table["count"] <= table["total_words"]).all()
    assert ((table["frequency"] >= 0) & (table["frequency"] <= 1)).all()


def test_year_table_without_zero_fill_holds_observed_rows(small_tables: FrequencyTables) -> None:
    table = small_tables.year_table(zero_fill=False)
    assert len(table) == 5
    assert (table["count"] > 0).all()


def test_article_table(small_tables: FrequencyTables) -> None:
    table = small_tables.article_table()
    assert len(table) == 4 * 3
    observed = small_tables.article_table(zero_fill=False)
    assert observed["count"].sum() == 7


def test_coverage(small_tables: FrequencyTables) -> None:
    assert small_tables.year_coverage().to_dict() == {"bird": 1, "cat": 2, "dog": 1, "fish": 1}
    assert small_tables.article_coverage().to_dict() == {"bird": 1, "cat": 2, "dog": 2, "fish": 1}


def test_worker_count_does_not_change_tables(tokenizer) -> None:
    articles = [
        make_article(f"{year}-{i}", year, " ".join(["cat"] * (i + 1)) + " dog fish" * (year - 1999))
        for year in (2000, 2001, 2002)
        for i in range(3)
    ][:8]
    serial = FrequencyAggregator(tokenizer, workers=1).aggregate(articles)
    parallel = FrequencyAggregator(tokenizer, workers=2, chunksize=1).aggregate(articles)

    assert parallel.year_table().equals(serial.year_table())
    assert parallel.article_table().equals(serial.article_table())
    assert parallel.article_ids == serial.article_ids
    assert parallel.forms == serial.forms


def test_partials_reduce_to_the_same_tables_in_any_order(tokenizer, small_corpus) -> None:
    partials = FrequencyAggregator(tokenizer).count_articles(small_corpus)
    forward = FrequencyTables.from_partials(partials).year_table()
    backward = FrequencyTables.from_partials(list(reversed(partials))).year_table()

    assert forward.equals(backward)


def test_restrict_keeps_corpus_totals(small_tables: FrequencyTables) -> None:
    restricted = small_tables.restrict(["cat"])

    assert restricted.stems == ["cat"]
    assert restricted.num_articles == 3
    assert restricted.total_words.to_dict() == {2000: 5, 2001: 2}
    assert set(stem for stem, _ in restricted.forms) == {"cat"}


def test_stem_matrix(small_tables: FrequencyTables) -> None:
    matrix = small_tables.stem_matrix(["cat", "dog"])

    assert small_tables.article_ids == ["a1", "a2", "a3"]
    np.testing.assert_array_equal(matrix, [[2, 1], [0, 1], [1, 0]])


def test_top_stems(small_tables: FrequencyTables) -> None:
    top = small_tables.top_stems(2)
    assert list(top["stem"]) == ["cat", "dog"]
    assert list(top["count"]) == [3, 2]


def test_total_words_table(small_tables: FrequencyTables) -> None:
    table = small_tables.total_words_table()
    assert list(table.columns) == ["year", "total_words"]
    assert list(table["total_words"]) == [5, 2]


def test_corpus_summary(small_corpus) -> None:
    summary = corpus_summary(small_corpus)
    assert list(summary["articles"]) == [2, 1]
    assert list(summary["year"]) == [2000, 2001]
