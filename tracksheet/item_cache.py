"""Item lists: snapshots of document values shaped as chunks of rows.

A Block view shows one chunk per order table entry, each holding the rows
of the referenced block instances side by side.  An Order view shows a
single chunk: the order table itself.

The :class:`ItemCache` owned by each view holds the last item list it
rendered and answers the geometry questions the cursor and the incremental
update need (chunk boundaries, shape comparison, changed rows).
"""

import enum
import logging
import typing

import tracksheet.document
import tracksheet.errors


logger = logging.getLogger(__name__)


Row = typing.List[typing.Any]
Chunk = typing.List[Row]
ItemList = typing.List[Chunk]


class BlockViewKind (enum.Enum):

	BLOCK = "block"
	ORDER = "order"


def chunk_length (value: typing.Any) -> int:

	"""Declared row count of an order entry; unset or invalid lengths count as 0."""

	if isinstance(value, int) and not isinstance(value, bool) and value > 0:
		return value

	return 0


def get_item_list (
	document: tracksheet.document.DocumentStore,
	group_id: str,
	group_instance: int,
	kind: BlockViewKind,
) -> ItemList:

	"""
	Fetch the current values a view of ``group_id`` displays.

	Block instances shorter than their order entry are padded with empty rows;
	longer ones are truncated to the declared length.  Pure read.
	"""

	group = document.schema.group(group_id)
	order = document.order_table(group_id, group_instance)

	if kind is BlockViewKind.ORDER:
		return [[list(entry) for entry in order]]

	width = sum(len(fields) for fields in group.blocks.values())
	items: ItemList = []

	for length, *instances in order:
		rows = chunk_length(length)
		block_rows = document.block_rows(group_id, group_instance, instances)[:rows]
		block_rows.extend([None] * width for _ in range(rows - len(block_rows)))
		items.append(block_rows)

	return items


class ItemCache:

	"""
	The item list a view last rendered.

	Every row holds exactly ``field_count`` values; :meth:`replace` enforces it.
	"""

	def __init__ (self, field_count: int) -> None:

		"""Start empty for rows of ``field_count`` values."""

		self.field_count = field_count
		self._chunks: ItemList = []
		self._boundaries: typing.List[typing.Tuple[int, int]] = []

	def replace (self, items: ItemList) -> None:

		"""
		Replace the cached item list.

		Raises ``ShapeMismatchError`` if any row has the wrong width; the
		cache is left unchanged in that case.
		"""

		self.check_rows(items)
		self._chunks = items
		self._boundaries = self._compute_boundaries()

	def check_rows (self, items: ItemList) -> None:

		for chunk_index, chunk in enumerate(items):
			for row in chunk:
				if len(row) != self.field_count:
					raise tracksheet.errors.ShapeMismatchError(
						f"Chunk {chunk_index} has a row of {len(row)} values, expected {self.field_count}"
					)

	@property
	def chunks (self) -> ItemList:

		return self._chunks

	@property
	def shape (self) -> typing.Tuple[int, ...]:

		"""Row count of each chunk."""

		return tuple(len(chunk) for chunk in self._chunks)

	@property
	def total_rows (self) -> int:

		return sum(self.shape)

	def rows (self) -> typing.List[Row]:

		"""All rows, chunk after chunk."""

		return [row for chunk in self._chunks for row in chunk]

	def row (self, index: int) -> Row:

		chunk_index = self.chunk_index(index)
		start, _ = self._boundaries[chunk_index]
		return self._chunks[chunk_index][index - start]

	def matches (self, items: ItemList) -> bool:

		return self._chunks == items

	# ------------------------------------------------------------------
	# Chunk geometry
	# ------------------------------------------------------------------

	def _compute_boundaries (self) -> typing.List[typing.Tuple[int, int]]:

		boundaries: typing.List[typing.Tuple[int, int]] = []
		start = 0

		for length in self.shape:
			boundaries.append((start, start + length - 1))
			start += length

		return boundaries

	def chunk_boundaries (self) -> typing.List[typing.Tuple[int, int]]:

		"""
		Inclusive ``(first_row, last_row)`` of every chunk.

		An empty chunk yields ``(start, start - 1)`` so indices stay aligned
		with order positions.
		"""

		return list(self._boundaries)

	def chunk_index (self, row: int) -> int:

		"""Index of the chunk containing ``row``; raises ``IndexError`` if out of range."""

		for index, (start, end) in enumerate(self._boundaries):
			if start <= row <= end:
				return index

		raise IndexError(f"Row {row} is outside the item list ({self.total_rows} rows)")

	def chunk_starts (self) -> typing.List[int]:

		"""First rows of the non-empty chunks, ascending."""

		return [start for start, end in self._boundaries if end >= start]

	# ------------------------------------------------------------------
	# Diffing
	# ------------------------------------------------------------------

	def same_shape (self, items: ItemList) -> bool:

		return self.shape == tuple(len(chunk) for chunk in items)

	def changed_rows (self, items: ItemList) -> typing.List[int]:

		"""
		Flat indices of the rows that differ between the cache and ``items``.

		Raises ``ShapeMismatchError`` when the shapes differ, since rows can
		then no longer be paired up.
		"""

		if not self.same_shape(items):
			raise tracksheet.errors.ShapeMismatchError(
				f"Item list shape {tuple(len(chunk) for chunk in items)} differs from cached {self.shape}"
			)

		self.check_rows(items)

		new_rows = [row for chunk in items for row in chunk]
		return [index for index, (old, new) in enumerate(zip(self.rows(), new_rows)) if old != new]
