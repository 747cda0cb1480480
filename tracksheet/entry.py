"""Value entry: turning a keystroke into the new value of the field under the cursor.

The host shell resolves raw keys into a key class and value (the keymap is
not our concern).  What a key does depends on the command behind the active
field:

| Field              | Key classes        | Effect                                      |
|--------------------|--------------------|---------------------------------------------|
| note key/ukey      | NOTE               | semitone offset from the base octave, or ``"rest"`` |
| trigger            | any                | toggle set/unset                            |
| int/uint/reference | DIGIT, CHARACTER   | replace the digit under the cursor          |
| key/ukey           | DIGIT, CHARACTER   | next key name starting with the character   |
| string             | DIGIT, CHARACTER   | replace the character under the cursor      |

Keys that do not apply raise ``NoOpEdit``.
"""

import enum
import typing

import tracksheet.errors
import tracksheet.layout
import tracksheet.note_table
import tracksheet.schema


class KeyClass (enum.Enum):

	NOTE = "note"
	DIGIT = "digit"
	CHARACTER = "character"


TEXT_CLASSES = (KeyClass.DIGIT, KeyClass.CHARACTER)


def _is_empty (value: typing.Any) -> bool:

	return value is None or value == []


def note_entry (command: tracksheet.schema.Command, key_value: typing.Any, base_octave: int) -> str:

	"""Key name for a note key; ``key_value`` is a semitone offset or ``"rest"``."""

	if key_value == tracksheet.note_table.REST:
		name: typing.Optional[str] = tracksheet.note_table.REST
	elif isinstance(key_value, int) and not isinstance(key_value, bool):
		name = tracksheet.note_table.note_name(base_octave, key_value)
	else:
		name = None

	if name is None or name not in command.keys:
		raise tracksheet.errors.NoOpEdit(f"{key_value!r} is not a key of this note command")

	return name


def trigger_entry (current: typing.Any) -> typing.Optional[bool]:

	return None if current else True


def numeric_entry (
	command: tracksheet.schema.Command,
	current: typing.Any,
	digit: int,
	width: int,
	key_value: str,
	base: int,
) -> int:

	"""
	Replace digit ``digit`` (0 = leftmost) of the current value with ``key_value``.

	Unset values count as 0.  The result is clamped to the command's range.
	"""

	if len(str(key_value)) != 1:
		raise tracksheet.errors.NoOpEdit(f"{key_value!r} is not a single digit")

	try:
		int(str(key_value), base)
	except ValueError:
		raise tracksheet.errors.NoOpEdit(f"{key_value!r} is not a base {base} digit") from None

	value = 0 if _is_empty(current) else current
	text = tracksheet.layout.format_number(command, value, base, width)
	text = text[:digit] + str(key_value).upper() + text[digit + 1:]

	return command.from_unsigned(min(int(text, base), command.max_value))


def key_entry (command: tracksheet.schema.Command, current: typing.Any, key_value: str) -> str:

	"""Pick the key named after ``key_value``, cycling through keys sharing the initial."""

	initial = str(key_value)[:1].lower()
	names = [name for name in command.keys if initial and name.lower().startswith(initial)]

	if not names:
		raise tracksheet.errors.NoOpEdit(f"No key starting with {key_value!r}")

	if current in names:
		return names[(names.index(current) + 1) % len(names)]

	return names[0]


def string_entry (current: typing.Any, position: int, width: int, key_value: str) -> str:

	"""Overwrite the character at ``position``, padding with spaces as needed."""

	char = str(key_value)

	if len(char) != 1 or not char.isprintable():
		raise tracksheet.errors.NoOpEdit(f"{key_value!r} is not a printable character")

	text = (current if isinstance(current, str) else "").ljust(width)

	return (text[:position] + char + text[position + 1:]).rstrip()


def entry_value (
	config: tracksheet.layout.FieldConfig,
	command: tracksheet.schema.Command,
	current: typing.Any,
	digit: int,
	key_class: KeyClass,
	key_value: typing.Any,
	base: int,
	base_octave: int,
) -> typing.Any:

	"""
	New value of the active field after a keystroke.

	Parameters:
		config: Layout of the active field.
		command: Command behind the active field.
		current: The field's current value.
		digit: Index of the cursor stop within the field.
		key_class: Class of the key as resolved by the host.
		key_value: The key's value (semitone offset, digit or character).
		base: Numeric display base.
		base_octave: Octave note offsets are relative to.

	Raises:
		NoOpEdit: The key does nothing in this field.
	"""

	tag = config.type_tag

	if tag == tracksheet.layout.NOTE_TAG:
		if key_class is not KeyClass.NOTE:
			raise tracksheet.errors.NoOpEdit("Note fields only take note keys")
		return note_entry(command, key_value, base_octave)

	if tag == "trigger":
		return trigger_entry(current)

	if key_class not in TEXT_CLASSES:
		raise tracksheet.errors.NoOpEdit(f"{tag} fields do not take {key_class.value} keys")

	if tag in ("int", "uint", "reference"):
		return numeric_entry(command, current, digit, config.display_width, key_value, base)

	if tag in ("key", "ukey"):
		return key_entry(command, current, key_value)

	if tag == "string":
		return string_entry(current, digit, config.display_width, key_value)

	raise tracksheet.errors.ConfigurationError(f"Unknown field type {tag!r}")
