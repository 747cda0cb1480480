"""Module schema: the commands behind each field and how fields group into blocks.

The schema is owned by the document store and does not change at runtime.
Each field of a block is backed by a :class:`Command` describing its value
kind, range and key table.  A :class:`GroupDef` lists the blocks of a group
and the fields of each block; every group also has an order block whose
fields are derived from its block list (``ROWS`` plus one ``R_<BLOCK>``
reference per block).
"""

import dataclasses
import enum
import typing

import tracksheet.errors


ORDER_ROWS_FIELD = "ROWS"


class CommandType (enum.Enum):

	"""The closed set of command value kinds."""

	INT = "int"
	UINT = "uint"
	KEY = "key"
	UKEY = "ukey"
	TRIGGER = "trigger"
	REFERENCE = "reference"
	STRING = "string"


NUMERIC_TYPES = (CommandType.INT, CommandType.UINT, CommandType.REFERENCE)
KEY_TYPES = (CommandType.KEY, CommandType.UKEY)


@dataclasses.dataclass
class Command:

	"""
	Describes the values one field can hold.

	Attributes:
		kind: Value kind name (``int``, ``uint``, ``key``, ``ukey``,
			``trigger``, ``reference`` or ``string``).
		bits: Bit width of numeric and reference values.
		keys: Key name to value table for key commands.
		is_note: True for key commands whose keys are note names.
		description: Human-readable label shown in the status bar.
		reference_to: Block id a reference command points into.
	"""

	kind: str
	bits: int = 8
	keys: typing.Dict[str, int] = dataclasses.field(default_factory=dict)
	is_note: bool = False
	description: str = ""
	reference_to: typing.Optional[str] = None

	@property
	def command_type (self) -> CommandType:

		"""The kind as a ``CommandType``; raises ``ConfigurationError`` if unknown."""

		try:
			return CommandType(self.kind)
		except ValueError:
			raise tracksheet.errors.ConfigurationError(f"Unknown command kind: {self.kind!r}") from None

	@property
	def max_value (self) -> int:

		"""Largest value a numeric or reference command can hold (unsigned form for ``int``)."""

		return 2 ** self.bits - 1

	def to_unsigned (self, value: int) -> int:

		"""Two's-complement view of a signed value; unsigned values pass through."""

		if self.command_type is CommandType.INT:
			return value % (2 ** self.bits)

		return value

	def from_unsigned (self, value: int) -> int:

		"""Inverse of :meth:`to_unsigned`."""

		if self.command_type is CommandType.INT and value >= 2 ** (self.bits - 1):
			return value - 2 ** self.bits

		return value


@dataclasses.dataclass
class GroupDef:

	"""
	A group of blocks sequenced by a shared order table.

	Attributes:
		group_id: Name of the group (e.g. ``"PATTERNS"``).
		blocks: Block id to ordered field ids, in display order.
	"""

	group_id: str
	blocks: typing.Dict[str, typing.List[str]]

	@property
	def order_id (self) -> str:

		"""Id of the group's order block."""

		return f"{self.group_id}_ORDER"

	@property
	def block_ids (self) -> typing.List[str]:

		return list(self.blocks)

	@property
	def order_fields (self) -> typing.List[str]:

		"""Order block fields: the chunk length followed by one reference per block."""

		return [ORDER_ROWS_FIELD] + [reference_field(block_id) for block_id in self.blocks]

	def block_of (self, field_id: str) -> str:

		"""Return the id of the block (or order block) that owns ``field_id``."""

		for block_id, fields in self.blocks.items():
			if field_id in fields:
				return block_id

		if field_id in self.order_fields:
			return self.order_id

		raise tracksheet.errors.ConfigurationError(f"Field {field_id!r} is not part of group {self.group_id!r}")


def reference_field (block_id: str) -> str:

	"""Name of the order field that references instances of ``block_id``."""

	return f"R_{block_id}"


class ModuleSchema:

	"""Commands and groups of a module."""

	def __init__ (self, commands: typing.Dict[str, Command], groups: typing.Iterable[GroupDef]) -> None:

		"""
		Store commands and groups, adding the implicit order commands of each group.

		Raises ``ConfigurationError`` when a block field has no command.
		"""

		self.commands: typing.Dict[str, Command] = dict(commands)
		self.groups: typing.Dict[str, GroupDef] = {group.group_id: group for group in groups}

		for group in self.groups.values():

			for block_id, fields in group.blocks.items():
				for field_id in fields:
					if field_id not in self.commands:
						raise tracksheet.errors.ConfigurationError(
							f"Field {field_id!r} of block {block_id!r} has no command"
						)

				self.commands.setdefault(
					reference_field(block_id),
					Command(kind="reference", description=f"{block_id} instance", reference_to=block_id),
				)

			self.commands.setdefault(ORDER_ROWS_FIELD, Command(kind="uint", description="Rows"))

	def group (self, group_id: str) -> GroupDef:

		"""Return the group definition; raises ``ConfigurationError`` if it does not exist."""

		if group_id not in self.groups:
			raise tracksheet.errors.ConfigurationError(
				f"Group {group_id!r} not found. Available: {list(self.groups)}"
			)

		return self.groups[group_id]

	def command (self, field_id: str) -> Command:

		"""Return the command behind ``field_id``; raises ``ConfigurationError`` if missing."""

		if field_id not in self.commands:
			raise tracksheet.errors.ConfigurationError(f"No command for field {field_id!r}")

		return self.commands[field_id]
