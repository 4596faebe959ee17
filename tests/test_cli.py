import json
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from vocabtrend.cli.app import app
from vocabtrend.config import ConfigModel, load_config, load_exceptions, save_config

runner = CliRunner()


@pytest.fixture
def config_path(tmp_path: Path, rising_corpus) -> Path:
    snapshot = tmp_path / "corpus.jsonl"
    with open(snapshot, "w") as f:
        for article in rising_corpus:
            f.write(json.dumps(article.model_dump()) + "\n")

    path = tmp_path / "config.yaml"
    save_config(
        ConfigModel(
            workspace_root=str(tmp_path / "ws"),
            corpus={"snapshot_path": "corpus.jsonl"},
            text={"stopword_source": "none"},
        ),
        path,
    )
    return path


def test_init_writes_config_and_exception_list(tmp_path: Path) -> None:
    config_dir = tmp_path / "cfg"
    result = runner.invoke(app, ["init", "--config-dir", str(config_dir), "--workspace", str(tmp_path / "ws")])

    assert result.exit_code == 0, result.output
    assert load_config(config_dir / "config.yaml").workspace_root == str(tmp_path / "ws")
    assert load_exceptions(config_dir / "exceptions.yaml") == []

    again = runner.invoke(app, ["init", "--config-dir", str(config_dir), "--workspace", str(tmp_path / "ws")])
    assert again.exit_code == 1


def test_exception_commands(config_path: Path) -> None:
    add = runner.invoke(
        app,
        ["exceptions", "add", "2001-0", "--action", "set_year", "--value", "2002", "--reason", "print date",
         "--config", str(config_path)],
    )
    assert add.exit_code == 0, add.output

    bad = runner.invoke(
        app, ["exceptions", "add", "x", "--action", "set_year", "--reason", "?", "--config", str(config_path)]
    )
    assert bad.exit_code == 1

    listed = runner.invoke(app, ["exceptions", "list", "--config", str(config_path)])
    assert listed.exit_code == 0
    assert "2001-0" in listed.output

    data = yaml.safe_load((config_path.parent / "exceptions.yaml").read_text())
    assert data["exceptions"][0]["value"] == "2002"

    removed = runner.invoke(app, ["exceptions", "remove", "2001-0", "--config", str(config_path)])
    assert removed.exit_code == 0
    assert load_exceptions(config_path.parent / "exceptions.yaml") == []

    missing = runner.invoke(app, ["exceptions", "remove", "2001-0", "--config", str(config_path)])
    assert missing.exit_code == 1


def test_run_show_and_sentences(tmp_path: Path, config_path: Path) -> None:
    result = runner.invoke(
        app,
        ["run", "--config", str(config_path), "--name", "cli-run", "--replicates", "10", "--seed", "3",
         "--keep-replicates"],
    )
    assert result.exit_code == 0, result.output

    run_dir = tmp_path / "ws" / "runs" / "cli-run"
    assert (run_dir / "trends.csv").exists()
    assert (run_dir / "bootstrap_replicates.csv").exists()

    shown = runner.invoke(app, ["show", "--config", str(config_path)])
    assert shown.exit_code == 0, shown.output
    assert "ancient" in shown.output

    exported = runner.invoke(app, ["sentences", "studi", "--config", str(config_path)])
    assert exported.exit_code == 0, exported.output
    assert (run_dir / "sentences" / "studi.tsv").exists()


def test_show_without_runs(config_path: Path) -> None:
    result = runner.invoke(app, ["show", "--config", str(config_path)])
    assert result.exit_code == 1


def test_run_fails_on_missing_corpus(tmp_path: Path, config_path: Path) -> None:
    result = runner.invoke(
        app, ["run", "--config", str(config_path), "--corpus", str(tmp_path / "absent.jsonl"), "--name", "x"]
    )
    assert result.exit_code == 1
