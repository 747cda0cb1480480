"""Field layout: how wide each column is, where it starts, and where the cursor can stop.

Computed once per view from the schema and the configured numeric base.
The widths follow the value each command can hold:

- ``int``, ``uint``, ``reference`` - digits of ``2**bits - 1`` in the display base.
- ``key``, ``ukey`` - the longest key name, or 3 characters for note fields.
- ``trigger`` - 1 character.
- ``string`` - the configured string width.

Fields of the same block are separated by one space, adjacent blocks by two.
"""

import dataclasses
import logging
import typing

import tracksheet.errors
import tracksheet.note_table
import tracksheet.schema


logger = logging.getLogger(__name__)


NOTE_TAG = "note"

EMPTY_CHAR = "."
TRIGGER_CHAR = "*"

FIELD_SEPARATOR = 1
BLOCK_SEPARATOR = 2


@dataclasses.dataclass(frozen=True)
class FieldConfig:

	"""
	Geometry of one grid column.

	Attributes:
		field_id: The field (and command) id.
		type_tag: ``"note"`` for note keys, otherwise the command kind.
		display_width: Characters the column occupies.
		start_offset: Character offset of the column within a row.
		cursor_width: Characters covered by one cursor stop.
		cursor_digits: Number of cursor stops within the column.
		block_id: Block owning the field.
	"""

	field_id: str
	type_tag: str
	display_width: int
	start_offset: int
	cursor_width: int
	cursor_digits: int
	block_id: str

	@property
	def end_offset (self) -> int:

		"""First character offset past the column."""

		return self.start_offset + self.display_width

	def stops (self) -> typing.List[int]:

		"""Character offsets of the cursor stops in this column."""

		return [self.start_offset + digit * self.cursor_width for digit in range(self.cursor_digits)]


def digit_count (value: int, base: int) -> int:

	"""Number of characters needed to write ``value`` in ``base``."""

	count = 1

	while value >= base:
		value //= base
		count += 1

	return count


def field_width (command: tracksheet.schema.Command, base: int, string_width: int) -> int:

	"""Display width of a field backed by ``command``."""

	command_type = command.command_type

	if command_type in tracksheet.schema.NUMERIC_TYPES:
		return digit_count(command.max_value, base)

	if command_type in tracksheet.schema.KEY_TYPES:
		if command.is_note:
			return tracksheet.note_table.NOTE_DISPLAY_WIDTH
		return max((len(name) for name in command.keys), default=1)

	if command_type is tracksheet.schema.CommandType.TRIGGER:
		return 1

	return string_width


def type_tag (command: tracksheet.schema.Command) -> str:

	if command.is_note and command.command_type in tracksheet.schema.KEY_TYPES:
		return NOTE_TAG

	return command.command_type.value


def compute_field_configs (
	fields: typing.Sequence[typing.Tuple[str, str]],
	schema: tracksheet.schema.ModuleSchema,
	base: int,
	string_width: int,
) -> typing.List[FieldConfig]:

	"""
	Lay out ``fields`` left to right.

	Parameters:
		fields: ``(field_id, block_id)`` pairs in display order.
		schema: Supplies the command behind each field.
		base: Numeric display base.
		string_width: Width of string fields.

	Raises:
		ConfigurationError: A field has no command or an unknown value kind.
	"""

	configs: typing.List[FieldConfig] = []
	offset = 0
	previous_block: typing.Optional[str] = None

	for field_id, block_id in fields:

		command = schema.command(field_id)
		width = field_width(command, base, string_width)
		tag = type_tag(command)

		if previous_block is not None:
			offset += FIELD_SEPARATOR if block_id == previous_block else BLOCK_SEPARATOR

		if tag in (NOTE_TAG, "trigger", "key", "ukey"):
			cursor_width, cursor_digits = width, 1
		else:
			cursor_width, cursor_digits = 1, width

		configs.append(FieldConfig(
			field_id = field_id,
			type_tag = tag,
			display_width = width,
			start_offset = offset,
			cursor_width = cursor_width,
			cursor_digits = cursor_digits,
			block_id = block_id,
		))

		offset += width
		previous_block = block_id

	logger.debug(f"Laid out {len(configs)} fields, row width {offset}")

	return configs


def row_width (configs: typing.Sequence[FieldConfig]) -> int:

	return configs[-1].end_offset if configs else 0


def format_number (command: tracksheet.schema.Command, value: int, base: int, width: int) -> str:

	"""Zero-padded, upper-case rendering of a numeric value."""

	text = format(command.to_unsigned(value), "X" if base == 16 else "d")
	return text.rjust(width, "0")[-width:]


def format_value (config: FieldConfig, command: tracksheet.schema.Command, value: typing.Any, base: int) -> str:

	"""Render one cell exactly ``config.display_width`` characters wide."""

	width = config.display_width

	if value is None or value == []:
		return EMPTY_CHAR * width

	if config.type_tag == NOTE_TAG:
		text = tracksheet.note_table.display_name(value)

	elif config.type_tag == "trigger":
		text = TRIGGER_CHAR

	elif config.type_tag in ("int", "uint", "reference"):
		return format_number(command, value, base, width)

	else:
		text = str(value)

	return text[:width].ljust(width)


def format_row (
	configs: typing.Sequence[FieldConfig],
	schema: tracksheet.schema.ModuleSchema,
	row: typing.Sequence[typing.Any],
	base: int,
) -> str:

	"""Render a row with every cell at its start offset."""

	parts: typing.List[str] = []
	position = 0

	for config, value in zip(configs, row):
		parts.append(" " * (config.start_offset - position))
		parts.append(format_value(config, schema.command(config.field_id), value, base))
		position = config.end_offset

	return "".join(parts)
