import pytest

import tracksheet.entry
import tracksheet.errors
import tracksheet.layout

import conftest


KeyClass = tracksheet.entry.KeyClass


def _entry (field_id: str, block_id: str, current, key_class, key_value, digit: int = 0, base: int = 16):

	schema = conftest.make_schema()
	config = tracksheet.layout.compute_field_configs([(field_id, block_id)], schema, base, 16)[0]

	return tracksheet.entry.entry_value(config, schema.command(field_id), current, digit, key_class, key_value, base, 4)


def test_note_offsets_from_base_octave () -> None:

	"""Note keys are semitone offsets from the base octave."""

	assert _entry("NOTE", "CH1", None, KeyClass.NOTE, 0) == "c4"
	assert _entry("NOTE", "CH1", "c4", KeyClass.NOTE, 13) == "c#5"
	assert _entry("NOTE", "CH1", None, KeyClass.NOTE, "rest") == "rest"


def test_note_outside_the_table_is_ignored () -> None:

	with pytest.raises(tracksheet.errors.NoOpEdit):
		_entry("NOTE", "CH1", None, KeyClass.NOTE, 48)


def test_note_field_ignores_text_keys () -> None:

	with pytest.raises(tracksheet.errors.NoOpEdit):
		_entry("NOTE", "CH1", None, KeyClass.DIGIT, "4")


def test_trigger_toggles () -> None:

	"""Any key flips a trigger between set and unset."""

	assert _entry("KICK", "DRUMS", None, KeyClass.CHARACTER, "x") is True
	assert _entry("KICK", "DRUMS", [], KeyClass.NOTE, 0) is True
	assert _entry("KICK", "DRUMS", True, KeyClass.DIGIT, "1") is None


def test_hex_digit_replaces_digit_under_cursor () -> None:

	assert _entry("VOL", "CH1", 0x40, KeyClass.DIGIT, "5", digit=1) == 0x45
	assert _entry("VOL", "CH1", 0x40, KeyClass.CHARACTER, "f", digit=0) == 0xF0
	assert _entry("VOL", "CH1", None, KeyClass.DIGIT, "7", digit=1) == 0x07


def test_decimal_entry_clamps_to_range () -> None:

	"""An 8-bit value typed past 255 is clamped."""

	assert _entry("VOL", "CH1", 64, KeyClass.DIGIT, "9", digit=0, base=10) == 255
	assert _entry("VOL", "CH1", 64, KeyClass.DIGIT, "1", digit=2, base=10) == 61


def test_signed_entry_goes_through_twos_complement () -> None:

	"""-2 shows as FE; typing 7 over the F gives 7E, typing 8 gives a negative value."""

	assert _entry("SPEED", "META", -2, KeyClass.DIGIT, "7", digit=0) == 0x7E
	assert _entry("SPEED", "META", -2, KeyClass.DIGIT, "8", digit=0) == 0x8E - 256


@pytest.mark.parametrize("key_value", ["g", "12", ""])
def test_invalid_digits_are_ignored (key_value: str) -> None:

	with pytest.raises(tracksheet.errors.NoOpEdit):
		_entry("VOL", "CH1", 0x40, KeyClass.CHARACTER, key_value)


def test_numeric_field_ignores_note_keys () -> None:

	with pytest.raises(tracksheet.errors.NoOpEdit):
		_entry("VOL", "CH1", 0x40, KeyClass.NOTE, 3)


def test_key_entry_cycles_through_matching_names () -> None:

	"""Repeating an initial steps through the key names that start with it."""

	assert _entry("FX", "CH1", None, KeyClass.CHARACTER, "v") == "vib"
	assert _entry("FX", "CH1", "vib", KeyClass.CHARACTER, "v") == "vol"
	assert _entry("FX", "CH1", "vol", KeyClass.CHARACTER, "V") == "vib"
	assert _entry("FX", "CH1", "vib", KeyClass.CHARACTER, "a") == "arp"

	with pytest.raises(tracksheet.errors.NoOpEdit):
		_entry("FX", "CH1", None, KeyClass.CHARACTER, "z")


def test_string_entry_overwrites_character () -> None:

	assert _entry("TITLE", "META", "song", KeyClass.CHARACTER, "S", digit=0) == "Song"
	assert _entry("TITLE", "META", "song", KeyClass.CHARACTER, "!", digit=6) == "song  !"
	assert _entry("TITLE", "META", None, KeyClass.DIGIT, "1", digit=0) == "1"
	assert _entry("TITLE", "META", "ab", KeyClass.CHARACTER, " ", digit=1) == "a"
