import argparse
from unittest.mock import patch

import pytest

from ffencode.cli import cli_main, parse_param
from ffencode.errors import ExecutionError


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("CONFIG_PATH", str(tmp_path / "none.json"))
    monkeypatch.setenv("FFENCODE_WORKPATH", str(tmp_path / "cache"))


def test_parse_param():
    assert parse_param("-crf=23") == ("-crf", "23")
    assert parse_param("vf=scale=640:-1") == ("-vf", "scale=640:-1")
    with pytest.raises(argparse.ArgumentTypeError):
        parse_param("novalue")


def test_presets_command_lists_presets(capsys):
    assert cli_main(["presets"]) == 0
    out = capsys.readouterr().out
    assert "[mp4]" in out
    assert "-vcodec libx264" in out


def test_encode_command_builds_options(tmp_path):
    with patch("ffencode.cli.execute") as execute:
        code = cli_main(["encode", "in.mov", "out.mp4", "--preset", "mp4", "--param", "crf=20"])

    assert code == 0
    job, settings, options = execute.call_args[0]
    assert job.output == "in.mov"
    assert settings.workpath == str(tmp_path / "cache")
    assert options.preset == "mp4"
    assert options.output == "out.mp4"
    assert options.params == {"-crf": "20"}


def test_encode_failure_exits_non_zero(capsys):
    with patch("ffencode.cli.execute", side_effect=ExecutionError(1)):
        assert cli_main(["encode", "in.mov", "out.mp4"]) == 1
    assert "code : 1" in capsys.readouterr().err


def test_fetch_prints_binary_path(capsys):
    with patch("ffencode.cli.resolve_binary", return_value="/opt/ffmpeg"):
        assert cli_main(["fetch"]) == 0
    assert capsys.readouterr().out.strip() == "/opt/ffmpeg"


def test_presets_listing_follows_preset_names(capsys):
    with patch("ffencode.cli.list_presets", return_value=["webm", "mp3"]):
        assert cli_main(["presets"]) == 0

    headers = [line for line in capsys.readouterr().out.splitlines() if line.startswith("[")]
    assert headers == ["[webm]", "[mp3]"]


def test_workpath_option_is_the_only_directory_created(tmp_path):
    with patch("ffencode.cli.resolve_binary", return_value="/opt/ffmpeg") as resolve:
        assert cli_main(["--workpath", str(tmp_path / "chosen"), "fetch"]) == 0

    assert resolve.call_args[0][0].workpath == str(tmp_path / "chosen")
    assert (tmp_path / "chosen").is_dir()
    assert not (tmp_path / "cache").exists()
