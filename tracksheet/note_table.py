"""Note names for note-type key commands.

Note keys are named ``<pitch><octave>`` in lower case with ``#`` for sharps
(``c4``, ``c#4``, ``a#2``).  The rest key is named ``rest``.  Convention:
**c4 = MIDI 60** (Middle C).

Grid cells are three characters wide, so names are displayed padded with a
dash (``C-4``, ``C#4``) and the rest as ``===``.
"""

import typing


NOTE_NAMES = ["c", "c#", "d", "d#", "e", "f", "f#", "g", "g#", "a", "a#", "b"]

REST = "rest"

REST_DISPLAY = "==="

NOTE_DISPLAY_WIDTH = 3

LOWEST_OCTAVE = 0
HIGHEST_OCTAVE = 9


def note_name (octave: int, semitone: int) -> typing.Optional[str]:

	"""Return the key name for ``semitone`` (may exceed 11) above C of ``octave``.

	Returns ``None`` when the note falls outside octaves 0-9.
	"""

	octave += semitone // 12
	semitone %= 12

	if not LOWEST_OCTAVE <= octave <= HIGHEST_OCTAVE:
		return None

	return f"{NOTE_NAMES[semitone]}{octave}"


def parse_note_name (name: str) -> typing.Tuple[int, int]:

	"""Split a note key name into ``(octave, semitone)``.

	Raises ``ValueError`` for names that are not notes (including ``rest``).
	"""

	pitch, octave = name[:-1], name[-1:]

	if pitch not in NOTE_NAMES or not octave.isdigit():
		raise ValueError(f"Not a note name: {name!r}")

	return int(octave), NOTE_NAMES.index(pitch)


def midi_number (name: str) -> int:

	"""Convert a note key name to a MIDI note number.  Examples: ``c4`` → 60, ``a4`` → 69."""

	octave, semitone = parse_note_name(name)
	return (octave + 1) * 12 + semitone


def display_name (name: str) -> str:

	"""Three-character grid rendering of a note key name."""

	if name == REST:
		return REST_DISPLAY

	pitch = name[:-1].upper()

	if len(pitch) == 1:
		pitch += "-"

	return f"{pitch}{name[-1]}"


def make_note_table (lowest: str = "c1", highest: str = "b7", rest_value: typing.Optional[int] = 0) -> typing.Dict[str, int]:

	"""
	Build a key table for a note command.

	Notes from ``lowest`` to ``highest`` (inclusive) are numbered upwards from
	1, or from 0 when there is no rest key.

	Parameters:
		lowest: Name of the lowest note.
		highest: Name of the highest note.
		rest_value: Value of the ``rest`` key, or ``None`` to omit it.

	Example:
		```python
		make_note_table("c1", "b1")
		# {"rest": 0, "c1": 1, "c#1": 2, ... "b1": 12}
		```
	"""

	low = midi_number(lowest)
	high = midi_number(highest)

	if high < low:
		raise ValueError(f"Note range {lowest}..{highest} is empty")

	table: typing.Dict[str, int] = {}

	if rest_value is not None:
		table[REST] = rest_value

	first_value = 0 if rest_value is None else 1

	for offset, number in enumerate(range(low, high + 1)):
		name = note_name(number // 12 - 1, number % 12)
		if name is None:
			raise ValueError(f"MIDI note {number} has no note name")
		table[name] = first_value + offset

	return table
