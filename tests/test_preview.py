"""Smoke tests for the preview CLI."""

import pytest

from room_gen.preview import main, parse_args


def test_defaults():
    args = parse_args([])
    assert args.theme == "living_room"
    assert args.seed is None
    assert args.rooms == 1
    assert tuple(args.size) == (10.0, 3.0, 10.0)


def test_single_room(capsys):
    assert main(["--theme", "office", "--seed", "42"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Blueprint (seed=42)")


def test_seeded_output_is_stable(capsys):
    main(["--seed", "5"])
    first = capsys.readouterr().out
    main(["--seed", "5"])
    assert capsys.readouterr().out == first


def test_level(capsys):
    assert main(["--rooms", "2", "--size", "6", "3", "6", "--seed", "7"]) == 0
    out = capsys.readouterr().out
    assert "Room_0 @ (0, 0, 0)" in out
    assert "Room_1 @ (6, 0, 0)" in out


def test_unknown_theme_rejected():
    with pytest.raises(SystemExit):
        parse_args(["--theme", "dungeon"])
