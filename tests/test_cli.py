import json
import os
import tarfile

import pytest

from curator.cli import build_parser, main
from curator.operations.version import current_version_info


def test_hello_command_prints_greeting(capsys):
    assert main(["hello"]) == 0
    assert capsys.readouterr().out == "hello world!\n"


@pytest.mark.parametrize("alias", ["hello", "hi", "hello-world"])
def test_hello_command_aliases(alias):
    args = build_parser().parse_args([alias])
    assert args.command_name == "hello"


def test_hello_command_takes_no_flags():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["hello", "--json"])


def test_version_json(capsys):
    assert main(["version", "--json"]) == 0
    out = capsys.readouterr().out
    assert out == current_version_info().to_json() + "\n"


def test_version_text(capsys):
    assert main(["version"]) == 0
    out = capsys.readouterr().out
    assert out == str(current_version_info()) + "\n"


def test_archive_create(tmp_path, monkeypatch):
    data = tmp_path / "data"
    data.mkdir()
    (data / "a.txt").write_text("alpha")
    (data / "b.log").write_text("beta")
    monkeypatch.chdir(tmp_path)

    status = main(
        [
            "archive", "create",
            "--item", "data",
            "--exclude", r"\.log$",
            "--prefix", "pkg",
            "--name", "out.tar.gz",
        ]
    )
    assert status == 0
    with tarfile.open(tmp_path / "out.tar.gz", "r:gz") as tar:
        assert tar.getnames() == ["pkg/data/a.txt"]
        assert tar.extractfile("pkg/data/a.txt").read() == b"alpha"


def test_archive_create_default_name():
    args = build_parser().parse_args(["archive", "create"])
    assert args.name == "archive.tar.gz"
    assert args.prefix == ""


def test_archive_missing_item_fails(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    status = main(["archive", "create", "--item", "missing", "--name", "x.tar.gz"])
    assert status == 1
    assert "curator:" in capsys.readouterr().err


def test_stat_defaults():
    args = build_parser().parse_args(["stat", "system"])
    assert args.interval == 10.0
    assert args.count == 0
    assert args.file == ""


@pytest.mark.parametrize(
    "text,seconds",
    [("1m30s", 90.0), ("500ms", 0.5), ("2h", 7200.0), ("0", 0.0)],
)
def test_stat_interval_durations(text, seconds):
    args = build_parser().parse_args(["stats", "system", "-i", text])
    assert args.interval == pytest.approx(seconds)


def test_stat_invalid_interval():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["stat", "system", "--interval", "ten"])


@pytest.mark.parametrize("command", ["process", "process-tree"])
def test_stat_process_requires_pid(command, capsys):
    assert main(["stat", command, "--count", "1"]) == 1
    assert "must specify a pid" in capsys.readouterr().err


def test_stat_system_writes_json_line(tmp_path):
    out = tmp_path / "stats.json"
    assert main(["stat", "system", "--count", "1", "--file", str(out)]) == 0
    lines = out.read_text().splitlines()
    assert len(lines) == 1
    doc = json.loads(lines[0])
    assert doc["logger"] == "curator.stats"
    assert "cpu" in doc


def test_stat_process_records_pid(tmp_path):
    out = tmp_path / "proc.json"
    pid = os.getpid()
    status = main(
        ["stat", "process", "--pid", str(pid), "--count", "1", "--file", str(out)]
    )
    assert status == 0
    doc = json.loads(out.read_text().splitlines()[0])
    assert doc["pid"] == pid


def test_missing_command_exits():
    with pytest.raises(SystemExit):
        main([])