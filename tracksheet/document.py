"""Document store: the module data the BlockView engine reads and mutates.

The engine talks to the store only through the :class:`DocumentStore`
protocol.  :class:`ModuleDocument` is an in-memory implementation used by
the demo entry point and the tests.

Node paths are ``/``-joined strings.  A block instance is addressed as
``GROUP/group_instance/BLOCK/block_instance`` (for example
``PATTERNS/0/CH1/3``); appending ``/FIELD`` addresses all values of one
field, and ``/FIELD/index`` a single value.  Order tables live in the block
``GROUP_ORDER``, instance 0.

Index semantics of the three mutations:

- ``mutate_set`` writes each ``(index, value)``, growing the field with ``None`` as needed.
- ``mutate_insert`` inserts in ascending index order, shifting later values down.
- ``mutate_remove`` removes in descending index order so every index refers to the
  state before the call; indices past the end are ignored.
"""

import copy
import logging
import typing

import tracksheet.schema


logger = logging.getLogger(__name__)


Value = typing.Any
IndexedValues = typing.Sequence[typing.Tuple[int, Value]]
OrderRow = typing.Tuple[typing.Any, ...]


def set_values (values: typing.List[Value], instances: IndexedValues) -> None:

	"""Write ``(index, value)`` pairs into ``values`` in place, growing it with ``None``."""

	for index, value in instances:
		if index >= len(values):
			values.extend([None] * (index + 1 - len(values)))
		values[index] = copy.deepcopy(value)


def insert_values (values: typing.List[Value], instances: IndexedValues) -> None:

	"""Insert ``(index, value)`` pairs in ascending index order."""

	for index, value in sorted(instances, key=lambda item: item[0]):
		if index > len(values):
			values.extend([None] * (index - len(values)))
		values.insert(index, copy.deepcopy(value))


def remove_values (values: typing.List[Value], indices: typing.Sequence[int]) -> None:

	"""Remove indices highest first; indices past the end are ignored."""

	for index in sorted(set(indices), reverse=True):
		if index < len(values):
			del values[index]


class DocumentStore (typing.Protocol):

	"""
	What the engine needs from the module document.
	"""

	schema: tracksheet.schema.ModuleSchema
	edit_step: int

	def node_path (self, group_id: str, group_instance: int, block_id: str, block_instance: int) -> str:
		...

	def read_node_instance (self, path: str) -> typing.Any:
		...

	def mutate_set (self, parent_path: str, field_id: str, instances: IndexedValues) -> None:
		...

	def mutate_insert (self, parent_path: str, field_id: str, instances: IndexedValues) -> None:
		...

	def mutate_remove (self, parent_path: str, field_id: str, instances: typing.Sequence[int]) -> None:
		...

	def order_table (self, group_id: str, group_instance: int) -> typing.List[OrderRow]:
		...

	def block_rows (
		self,
		group_id: str,
		group_instance: int,
		block_instance_ids: typing.Sequence[typing.Optional[int]],
	) -> typing.List[typing.List[Value]]:
		...


class ModuleDocument:

	"""
	In-memory module document.

	Stores one ``{field_id: [values]}`` mapping per block instance, keyed by
	node path.  Missing nodes read as empty; writing to a missing node that
	the schema allows creates it.

	Example:
		```python
		doc = ModuleDocument(schema)
		doc.set_block_rows("PATTERNS", 0, "CH1", 0, [["c4", 1], [None, 2]])
		doc.set_order("PATTERNS", 0, [(2, 0, 0)])
		```
	"""

	def __init__ (self, schema: tracksheet.schema.ModuleSchema, edit_step: int = 0) -> None:

		"""
		Create an empty document for ``schema``.

		Parameters:
			schema: Commands and groups of the module.
			edit_step: Rows to advance after an edit; 0 defers to the editor config.
		"""

		self.schema = schema
		self.edit_step = edit_step
		self._nodes: typing.Dict[str, typing.Dict[str, typing.List[Value]]] = {}

	# ------------------------------------------------------------------
	# Paths
	# ------------------------------------------------------------------

	def node_path (self, group_id: str, group_instance: int, block_id: str, block_instance: int) -> str:

		"""Path of a block instance (or of the order block, instance 0)."""

		return f"{group_id}/{group_instance}/{block_id}/{block_instance}"

	def _block_fields (self, parent_path: str) -> typing.List[str]:

		"""Validate a block instance path and return the fields its block holds."""

		parts = parent_path.split("/")

		if len(parts) != 4 or not parts[1].isdigit() or not parts[3].isdigit():
			raise ValueError(f"Malformed node path: {parent_path!r}")

		group_id, _, block_id, _ = parts
		group = self.schema.groups.get(group_id)

		if group is None:
			raise ValueError(f"Unknown group in path {parent_path!r}")

		if block_id == group.order_id:
			return group.order_fields

		if block_id not in group.blocks:
			raise ValueError(f"Unknown block in path {parent_path!r}")

		return group.blocks[block_id]

	def _field_values (self, parent_path: str, field_id: str, create: bool = False) -> typing.List[Value]:

		if field_id not in self._block_fields(parent_path):
			raise ValueError(f"Field {field_id!r} does not belong to {parent_path!r}")

		if not create:
			return self._nodes.get(parent_path, {}).get(field_id, [])

		return self._nodes.setdefault(parent_path, {}).setdefault(field_id, [])

	# ------------------------------------------------------------------
	# Reads
	# ------------------------------------------------------------------

	def read_node_instance (self, path: str) -> typing.Any:

		"""
		Read a field's values, or one of its values.

		``GROUP/gi/BLOCK/bi/FIELD`` returns a copy of the value list.
		``GROUP/gi/BLOCK/bi/FIELD/index`` returns the value at ``index``
		(``None`` past the end).
		"""

		parts = path.split("/")

		if len(parts) == 5:
			return copy.deepcopy(self._field_values("/".join(parts[:4]), parts[4]))

		if len(parts) == 6 and parts[5].isdigit():
			values = self._field_values("/".join(parts[:4]), parts[4])
			index = int(parts[5])
			return copy.deepcopy(values[index]) if index < len(values) else None

		raise ValueError(f"Malformed node instance path: {path!r}")

	def instance_length (self, parent_path: str) -> int:

		"""Number of rows a block instance holds (its longest field)."""

		self._block_fields(parent_path)
		return max((len(values) for values in self._nodes.get(parent_path, {}).values()), default=0)

	def order_table (self, group_id: str, group_instance: int) -> typing.List[OrderRow]:

		"""
		Return the order table as ``(length, block_instance, ...)`` tuples.

		Unset values read as ``None``.
		"""

		group = self.schema.group(group_id)
		path = self.node_path(group_id, group_instance, group.order_id, 0)
		columns = [self._field_values(path, field_id) for field_id in group.order_fields]

		return [
			tuple(copy.deepcopy(column[row]) if row < len(column) else None for column in columns)
			for row in range(self.instance_length(path))
		]

	def block_rows (
		self,
		group_id: str,
		group_instance: int,
		block_instance_ids: typing.Sequence[typing.Optional[int]],
	) -> typing.List[typing.List[Value]]:

		"""
		Rows of several block instances laid side by side.

		``block_instance_ids`` holds one instance id per block of the group, in
		block order (``None`` for no instance).  Each row concatenates the
		blocks' fields; shorter instances are padded with ``None``.
		"""

		group = self.schema.group(group_id)

		if len(block_instance_ids) != len(group.blocks):
			raise ValueError(f"Expected {len(group.blocks)} block instance ids, got {len(block_instance_ids)}")

		columns: typing.List[typing.List[Value]] = []

		for block_id, instance in zip(group.blocks, block_instance_ids):
			for field_id in group.blocks[block_id]:
				if instance is None:
					columns.append([])
				else:
					path = self.node_path(group_id, group_instance, block_id, instance)
					columns.append(self._field_values(path, field_id))

		length = max((len(column) for column in columns), default=0)

		return [
			[copy.deepcopy(column[row]) if row < len(column) else None for column in columns]
			for row in range(length)
		]

	# ------------------------------------------------------------------
	# Mutations
	# ------------------------------------------------------------------

	def mutate_set (self, parent_path: str, field_id: str, instances: IndexedValues) -> None:

		"""Write each ``(index, value)`` pair."""

		set_values(self._field_values(parent_path, field_id, create=True), instances)

	def mutate_insert (self, parent_path: str, field_id: str, instances: IndexedValues) -> None:

		"""Insert each ``(index, value)`` pair in ascending index order."""

		insert_values(self._field_values(parent_path, field_id, create=True), instances)

	def mutate_remove (self, parent_path: str, field_id: str, instances: typing.Sequence[int]) -> None:

		"""Remove each index, highest first."""

		remove_values(self._field_values(parent_path, field_id, create=True), instances)

	# ------------------------------------------------------------------
	# Building and inspecting documents
	# ------------------------------------------------------------------

	def set_block_rows (
		self,
		group_id: str,
		group_instance: int,
		block_id: str,
		block_instance: int,
		rows: typing.Sequence[typing.Sequence[Value]],
	) -> None:

		"""Replace a block instance with ``rows`` (one value per block field)."""

		path = self.node_path(group_id, group_instance, block_id, block_instance)
		fields = self._block_fields(path)

		for row in rows:
			if len(row) != len(fields):
				raise ValueError(f"Row {list(row)!r} does not match fields {fields!r}")

		self._nodes[path] = {
			field_id: [copy.deepcopy(row[column]) for row in rows]
			for column, field_id in enumerate(fields)
		}

	def set_order (self, group_id: str, group_instance: int, rows: typing.Sequence[OrderRow]) -> None:

		"""Replace a group's order table with ``(length, block_instance, ...)`` rows."""

		group = self.schema.group(group_id)
		self.set_block_rows(group_id, group_instance, group.order_id, 0, rows)
		logger.debug(f"Order of {group_id}/{group_instance} set to {len(rows)} rows")

	def snapshot (self) -> typing.Dict[str, typing.Dict[str, typing.List[Value]]]:

		"""
		Observable document state.

		Trailing ``None`` values, empty fields and empty nodes are dropped, since
		they read exactly like missing ones.
		"""

		result: typing.Dict[str, typing.Dict[str, typing.List[Value]]] = {}

		for path, fields in self._nodes.items():
			node: typing.Dict[str, typing.List[Value]] = {}

			for field_id, values in fields.items():
				trimmed = list(values)
				while trimmed and trimmed[-1] is None:
					trimmed.pop()
				if trimmed:
					node[field_id] = copy.deepcopy(trimmed)

			if node:
				result[path] = node

		return result
