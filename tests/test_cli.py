"""Tests for the aso-combos command line front end."""

import json

import pytest

from aso_combos.cli import format_breakdown, impact_label, main, parse_app_line


def test_summary_table(capsys) -> None:
    main(["Learn Spanish Fast", "Speak Spanish"])
    out = capsys.readouterr().out

    assert "Combo Audit" in out
    assert "Impact" in out
    assert "learn spanish" in out
    assert "Coverage:" in out


def test_detailed_output(capsys) -> None:
    main(["Learn Spanish Fast", "Speak Spanish", "--detailed"])
    out = capsys.readouterr().out

    assert "SCORE BREAKDOWN" in out
    assert "REDUNDANCY" in out
    assert "RECOMMENDED TO ADD" in out


def test_json_output_keeps_stdout_clean(capsys) -> None:
    main(["Learn Spanish Fast", "Speak Spanish", "--json"])
    captured = capsys.readouterr()

    results = json.loads(captured.out)
    assert len(results) == 1
    assert results[0]["stats"]["total_combos"] == len(results[0]["combos"])
    assert {"text", "type", "relevance_score", "source"} <= set(results[0]["combos"][0])
    assert "Auditing 1 app(s)" in captured.err


def test_apps_file(tmp_path, capsys) -> None:
    path = tmp_path / "apps.txt"
    path.write_text("# language apps\nLearn Spanish Fast | Speak Spanish\n\nChess Puzzles\n")

    main(["-f", str(path), "--json"])
    results = json.loads(capsys.readouterr().out)

    assert [(r["title"], r["subtitle"]) for r in results] == [
        ("Learn Spanish Fast", "Speak Spanish"),
        ("Chess Puzzles", ""),
    ]


def test_duplicate_apps_are_audited_once(tmp_path, capsys) -> None:
    path = tmp_path / "apps.txt"
    path.write_text("Learn Spanish Fast | A\nlearn spanish fast! | B\n")

    main(["Learn Spanish Fast", "A", "-f", str(path), "--json"])
    results = json.loads(capsys.readouterr().out)

    assert [(r["title"], r["subtitle"]) for r in results] == [("Learn Spanish Fast", "A")]


def test_blank_titles_are_dropped(tmp_path) -> None:
    path = tmp_path / "apps.txt"
    path.write_text("!!! | subtitle only\n")

    with pytest.raises(SystemExit) as exc:
        main(["-f", str(path)])
    assert exc.value.code == 2


def test_ruleset_file(tmp_path, capsys) -> None:
    path = tmp_path / "ruleset.json"
    path.write_text(json.dumps({"category_keywords": ["spanish"]}))

    main(["Learn Spanish Fast", "-r", str(path), "--json"])
    results = json.loads(capsys.readouterr().out)

    assert all(s["breakdown"]["category_bonus"] == 30 for s in results[0]["scored_combos"]
               if "spanish" in s["combo"])


def test_no_input_is_usage_error() -> None:
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2


def test_missing_file_exits_1(tmp_path, capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["-f", str(tmp_path / "missing.txt")])
    assert exc.value.code == 1
    assert "File not found" in capsys.readouterr().err


def test_bad_ruleset_exits_1(tmp_path, capsys) -> None:
    path = tmp_path / "ruleset.json"
    path.write_text("{not json")

    with pytest.raises(SystemExit) as exc:
        main(["Learn Spanish Fast", "-r", str(path)])
    assert exc.value.code == 1
    assert "Invalid rule set" in capsys.readouterr().err


def test_parse_app_line() -> None:
    assert parse_app_line(" Learn Spanish | Speak it \n") == ("Learn Spanish", "Speak it")
    assert parse_app_line("Chess Puzzles") == ("Chess Puzzles", "")


def test_format_helpers() -> None:
    assert impact_label(100) == "Very High"
    assert impact_label(15) == "Very Low"
    assert format_breakdown({"category_bonus": 30, "filler_penalty": -30, "length_bonus": 0}) == \
        "category bonus +30 / filler penalty -30"
    assert format_breakdown({"category_bonus": 0}) == "base only"
