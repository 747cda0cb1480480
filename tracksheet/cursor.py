"""Cursor addressing and navigation over an item cache.

The cursor is a ``(row, column)`` pair: ``row`` indexes the flattened rows
of all chunks and ``column`` is a character offset that always sits on one
of the cursor stops defined by the field layout.  Everything else the editor
needs to know (the field under the cursor, the chunk it is in, the row within
that chunk) is derived from the pair.
"""

import dataclasses
import enum
import typing

import tracksheet.item_cache
import tracksheet.layout


class Direction (enum.Enum):

	UP = "up"
	DOWN = "down"
	LEFT = "left"
	RIGHT = "right"
	HOME = "home"
	END = "end"


@dataclasses.dataclass
class CursorPosition:

	row: int = 0
	column: int = 0


class CursorModel:

	"""
	Cursor position plus the derivations and moves defined on it.

	Holds references to the view's field configs and item cache; it never
	modifies either.
	"""

	def __init__ (
		self,
		configs: typing.Sequence[tracksheet.layout.FieldConfig],
		cache: tracksheet.item_cache.ItemCache,
	) -> None:

		self._configs = list(configs)
		self._cache = cache
		self._stops = sorted(stop for config in self._configs for stop in config.stops())
		self.position = CursorPosition(0, self._stops[0] if self._stops else 0)

	@property
	def row (self) -> int:

		return self.position.row

	@property
	def column (self) -> int:

		return self.position.column

	def cursor_stops (self) -> typing.List[int]:

		"""Every valid cursor column, left to right."""

		return list(self._stops)

	def chunk_boundaries (self) -> typing.List[typing.Tuple[int, int]]:

		return self._cache.chunk_boundaries()

	# ------------------------------------------------------------------
	# Derived addresses
	# ------------------------------------------------------------------

	def active_field (self) -> tracksheet.layout.FieldConfig:

		"""The field whose span contains the cursor column."""

		for config in self._configs:
			if config.start_offset <= self.column < config.end_offset:
				return config

		raise LookupError(f"No field at column {self.column}")

	def active_field_id (self) -> str:

		return self.active_field().field_id

	def active_block (self) -> str:

		return self.active_field().block_id

	def digit_index (self) -> int:

		"""Which cursor stop within the active field the cursor is on."""

		config = self.active_field()
		return (self.column - config.start_offset) // config.cursor_width

	def order_position (self) -> int:

		"""Index of the chunk (order entry) containing the cursor row."""

		return self._cache.chunk_index(self.row)

	def field_instance (self) -> int:

		"""Offset of the cursor row within its chunk."""

		start, _ = self.active_zone()
		return self.row - start

	def active_zone (self) -> typing.Tuple[int, int]:

		"""Inclusive row range of the chunk containing the cursor."""

		return self._cache.chunk_boundaries()[self.order_position()]

	# ------------------------------------------------------------------
	# Placement
	# ------------------------------------------------------------------

	def nearest_stop (self, column_hint: int) -> int:

		"""
		Map an arbitrary character offset to a cursor stop.

		Offsets inside a field snap to the stop covering them; offsets in a
		separator (or past the row) snap to the closest stop, preferring the
		left one on ties.
		"""

		if not self._stops:
			return 0

		for config in self._configs:
			if config.start_offset <= column_hint < config.end_offset:
				digit = (column_hint - config.start_offset) // config.cursor_width
				return config.start_offset + min(digit, config.cursor_digits - 1) * config.cursor_width

		return min(self._stops, key=lambda stop: (abs(stop - column_hint), stop))

	def set (self, row: int, column: int) -> None:

		"""Place the cursor, clamping the row into range and snapping the column to a stop."""

		total = self._cache.total_rows

		if total == 0:
			self.position = CursorPosition(0, 0)
			return

		self.position = CursorPosition(max(0, min(row, total - 1)), self.nearest_stop(column))

	# ------------------------------------------------------------------
	# Navigation
	# ------------------------------------------------------------------

	def move (self, direction: Direction, step: int = 1) -> bool:

		"""
		Move the cursor.

		Up/Down move by ``step`` rows and wrap around the whole item list.
		Home goes to the start of the current chunk, or of the previous one
		when already at a chunk start.  End goes to the start of the next
		chunk, or to the last row.  Left/Right step through cursor stops and
		wrap within the row.

		Returns:
			True when the field under the cursor may have changed and the
			status text should be refreshed (Left/Right moves).
		"""

		total = self._cache.total_rows

		if total == 0 or not self._stops:
			self.position = CursorPosition(0, 0)
			return False

		row = self.row

		if direction is Direction.UP:
			self.position.row = (row - step) % total

		elif direction is Direction.DOWN:
			self.position.row = (row + step) % total

		elif direction is Direction.HOME:
			earlier = [start for start in self._cache.chunk_starts() if start < row]
			self.position.row = earlier[-1] if earlier else 0

		elif direction is Direction.END:
			later = [start for start in self._cache.chunk_starts() if start > row]
			self.position.row = later[0] if later else total - 1

		elif direction in (Direction.LEFT, Direction.RIGHT):
			index = self._stops.index(self.nearest_stop(self.column))
			offset = -1 if direction is Direction.LEFT else 1
			self.position.column = self._stops[(index + offset) % len(self._stops)]
			return True

		return False
