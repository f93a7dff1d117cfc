"""Tests for the command line entry point."""

import pytest

from richmark.__main__ import USAGE, convert, main


@pytest.fixture
def html_file(tmp_path):
    path = tmp_path / "doc.html"
    path.write_text(
        '<p>see <a href="http://e.com">here</a></p><ul><li>one</li><li>two</li></ul>',
        encoding="utf-8",
    )
    return path


def test_plain_mode(html_file, capsys):
    assert main(["--mode", "plain", str(html_file)]) == 0
    out = capsys.readouterr().out
    assert out == "see here <http://e.com>\n• one\n• two\n"


def test_lists_mode(html_file, capsys):
    assert main(["--mode=lists", str(html_file)]) == 0
    out = capsys.readouterr().out
    assert out.startswith("<p>")
    assert "<ul>\n<li>" in out
    assert out.count("<li>") == 2


def test_default_mode_is_fully_inline(html_file, capsys):
    assert main([str(html_file)]) == 0
    out = capsys.readouterr().out
    assert out.startswith("<html>")
    assert "<style" not in out
    assert 'style="' in out


@pytest.mark.parametrize("argv", [
    [],
    ["--mode"],
    ["--mode", "pdf", "x.html"],
    ["--mode=pdf", "x.html"],
    ["a.html", "b.html"],
])
def test_usage_errors(argv, capsys):
    assert main(argv) == 2
    assert USAGE in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.html")]) == 1
    assert "cannot read" in capsys.readouterr().err


def test_unparseable_file(tmp_path, capsys):
    path = tmp_path / "empty.html"
    path.write_text("   ", encoding="utf-8")
    assert main([str(path)]) == 1
    assert "could not parse" in capsys.readouterr().err


def test_version(capsys):
    assert main(["--version"]) == 0
    assert capsys.readouterr().out.strip()


def test_convert_markup_mode():
    markup = convert("<p>hi</p>", "markup")
    assert markup.startswith("<!DOCTYPE")
    assert convert("", "markup") is None
