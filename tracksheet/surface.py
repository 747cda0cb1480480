"""Render surfaces: where a BlockView draws its grid.

The engine only issues line and tag instructions; how they turn into pixels
or terminal cells is up to the surface.  :class:`TextSurface` keeps
everything in memory, records each instruction it receives and can render
itself as plain text for terminals and tests.

Replacing a line drops the tags on it (as a text widget does), so callers
that want to keep highlights re-apply them afterwards.
"""

import typing


ACTIVE_ZONE = "active-zone"
ROW_HIGHLIGHT_MAJOR = "rowhl-major"
ROW_HIGHLIGHT_MINOR = "rowhl-minor"


class RenderSurface (typing.Protocol):

	"""
	Instructions a BlockView issues to its display.
	"""

	def replace_all (self, lines: typing.Sequence[str]) -> None:
		...

	def replace_row (self, row: int, text: str) -> None:
		...

	def set_row_numbers (self, lines: typing.Sequence[str]) -> None:
		...

	def add_tag (self, tag: str, first_row: int, last_row: int) -> None:
		...

	def remove_tag (self, tag: str) -> None:
		...

	def row_tags (self, row: int) -> typing.List[str]:
		...

	def set_cursor (self, row: int, column: int, width: int) -> None:
		...

	def show_cursor (self) -> None:
		...

	def hide_cursor (self) -> None:
		...


class TextSurface:

	"""
	In-memory render surface.

	``instructions`` logs every call as a tuple of the method name and its
	arguments, oldest first; ``clear_instructions()`` resets it.

	Example:
		```python
		surface = TextSurface()
		view = BlockView(session, "PATTERNS", BlockViewKind.BLOCK, surface)
		view.update()
		print(surface.render())
		```
	"""

	def __init__ (self) -> None:

		self.lines: typing.List[str] = []
		self.row_numbers: typing.List[str] = []
		self.tags: typing.Dict[str, typing.Set[int]] = {}
		self.cursor: typing.Tuple[int, int, int] = (0, 0, 0)
		self.cursor_visible: bool = False
		self.instructions: typing.List[typing.Tuple[typing.Any, ...]] = []

	def clear_instructions (self) -> None:

		self.instructions = []

	def count (self, name: str) -> int:

		"""Number of logged instructions called ``name``."""

		return sum(1 for instruction in self.instructions if instruction[0] == name)

	# ------------------------------------------------------------------
	# RenderSurface
	# ------------------------------------------------------------------

	def replace_all (self, lines: typing.Sequence[str]) -> None:

		"""Replace every line; all tags are dropped."""

		self.instructions.append(("replace_all", len(lines)))
		self.lines = list(lines)
		self.tags = {}

	def replace_row (self, row: int, text: str) -> None:

		"""Replace one line; tags on that line are dropped."""

		self.instructions.append(("replace_row", row, text))
		self.lines[row] = text

		for rows in self.tags.values():
			rows.discard(row)

	def set_row_numbers (self, lines: typing.Sequence[str]) -> None:

		self.instructions.append(("set_row_numbers", len(lines)))
		self.row_numbers = list(lines)

	def add_tag (self, tag: str, first_row: int, last_row: int) -> None:

		self.instructions.append(("add_tag", tag, first_row, last_row))
		self.tags.setdefault(tag, set()).update(range(first_row, last_row + 1))

	def remove_tag (self, tag: str) -> None:

		self.instructions.append(("remove_tag", tag))
		self.tags.pop(tag, None)

	def row_tags (self, row: int) -> typing.List[str]:

		return sorted(tag for tag, rows in self.tags.items() if row in rows)

	def set_cursor (self, row: int, column: int, width: int) -> None:

		self.instructions.append(("set_cursor", row, column, width))
		self.cursor = (row, column, width)

	def show_cursor (self) -> None:

		self.instructions.append(("show_cursor",))
		self.cursor_visible = True

	def hide_cursor (self) -> None:

		self.instructions.append(("hide_cursor",))
		self.cursor_visible = False

	# ------------------------------------------------------------------
	# Text rendering
	# ------------------------------------------------------------------

	def render (self) -> str:

		"""
		Plain-text view of the surface.

		Each line is prefixed by its row number and a marker: ``>`` for the
		cursor row (when the cursor is visible), ``|`` inside the active zone.
		The cursor cell is wrapped in brackets.
		"""

		output: typing.List[str] = []
		active = self.tags.get(ACTIVE_ZONE, set())

		for row, line in enumerate(self.lines):

			number = self.row_numbers[row] if row < len(self.row_numbers) else ""

			if self.cursor_visible and row == self.cursor[0]:
				_, column, width = self.cursor
				line = f"{line[:column]}[{line[column:column + width]}]{line[column + width:]}"
				marker = ">"
			else:
				marker = "|" if row in active else " "

			output.append(f"{number} {marker} {line}".rstrip())

		return "\n".join(output)
