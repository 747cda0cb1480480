import pytest

import tracksheet.note_table


def test_note_name_carries_into_next_octave () -> None:

	"""Semitone offsets past B continue in the next octave."""

	assert tracksheet.note_table.note_name(4, 0) == "c4"
	assert tracksheet.note_table.note_name(4, 1) == "c#4"
	assert tracksheet.note_table.note_name(4, 12) == "c5"
	assert tracksheet.note_table.note_name(4, 14) == "d5"


def test_note_name_out_of_range () -> None:

	"""Notes outside octaves 0-9 have no name."""

	assert tracksheet.note_table.note_name(9, 12) is None
	assert tracksheet.note_table.note_name(0, -1) is None


def test_midi_number () -> None:

	"""c4 is Middle C (60)."""

	assert tracksheet.note_table.midi_number("c4") == 60
	assert tracksheet.note_table.midi_number("a4") == 69
	assert tracksheet.note_table.midi_number("f#2") == 42


def test_parse_rejects_non_notes () -> None:

	with pytest.raises(ValueError):
		tracksheet.note_table.parse_note_name("rest")

	with pytest.raises(ValueError):
		tracksheet.note_table.parse_note_name("h4")


def test_display_name () -> None:

	"""Display names are three characters wide."""

	assert tracksheet.note_table.display_name("c4") == "C-4"
	assert tracksheet.note_table.display_name("a#2") == "A#2"
	assert tracksheet.note_table.display_name("rest") == "==="


def test_make_note_table () -> None:

	"""Notes are numbered upwards after the rest key."""

	table = tracksheet.note_table.make_note_table("c1", "b1")

	assert list(table)[:3] == ["rest", "c1", "c#1"]
	assert table["rest"] == 0
	assert table["c1"] == 1
	assert table["b1"] == 12
	assert len(table) == 13


def test_make_note_table_without_rest () -> None:

	table = tracksheet.note_table.make_note_table("a3", "c4", rest_value=None)

	assert table == {"a3": 0, "a#3": 1, "b3": 2, "c4": 3}


def test_make_note_table_rejects_empty_range () -> None:

	with pytest.raises(ValueError):
		tracksheet.note_table.make_note_table("c4", "b3")


def test_make_note_table_full_range () -> None:

	"""Every note from octave 0 to octave 9 gets a name."""

	table = tracksheet.note_table.make_note_table("c0", "b9")

	assert len(table) == 121
	assert table["c0"] == 1
	assert table["b9"] == 120


def test_make_note_table_rejects_unknown_endpoint () -> None:

	with pytest.raises(ValueError):
		tracksheet.note_table.make_note_table("h4", "c5")
