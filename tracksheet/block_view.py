"""The BlockView engine: an editable grid over one group of a module.

A ``BlockView`` ties the pieces together for one group:

- the field layout (:mod:`tracksheet.layout`), computed once at construction,
- the item cache of values it last drew (:mod:`tracksheet.item_cache`),
- the cursor (:mod:`tracksheet.cursor`),
- edits and their undo/redo history (:mod:`tracksheet.actions`, :mod:`tracksheet.history`),
- a render surface it issues drawing instructions to (:mod:`tracksheet.surface`).

A Block-kind view shows the group's blocks side by side, one chunk per order
table entry.  An Order-kind view shows the order table itself.

After anything that may have changed the document, :meth:`BlockView.update`
fetches a fresh item list and redraws as little as possible: nothing when
the values are unchanged, single rows when only values changed, and the
whole grid when the chunk shape changed.

Example:
	```python
	session = Session(document)
	view = BlockView(session, "PATTERNS", BlockViewKind.BLOCK, TextSurface())
	view.update()
	view.focus()
	view.dispatch_entry(KeyClass.NOTE, 0)    # enter C at the base octave
	view.undo()
	```
"""

import dataclasses
import logging
import typing

import tracksheet.actions
import tracksheet.config
import tracksheet.cursor
import tracksheet.document
import tracksheet.entry
import tracksheet.errors
import tracksheet.events
import tracksheet.history
import tracksheet.item_cache
import tracksheet.layout
import tracksheet.surface


logger = logging.getLogger(__name__)


BlockViewKind = tracksheet.item_cache.BlockViewKind
Direction = tracksheet.cursor.Direction

_MIN_ROW_NUMBER_WIDTH = 2


@dataclasses.dataclass
class Session:

	"""
	Everything a view needs beyond its own state, passed in explicitly.

	Attributes:
		document: The module document being edited.
		config: Display and editing preferences.
		emitter: Event channel to the host shell.
	"""

	document: tracksheet.document.DocumentStore
	config: tracksheet.config.EditorConfig = dataclasses.field(default_factory=tracksheet.config.EditorConfig)
	emitter: tracksheet.events.EventEmitter = dataclasses.field(default_factory=tracksheet.events.EventEmitter)

	@property
	def edit_step (self) -> int:

		"""Rows to advance after an edit: the document's step, else the config's, never below 1."""

		step = self.document.edit_step or self.config.edit_step
		return step if step > 0 else 1


class BlockView:

	"""
	Editable grid for one group, in Block or Order kind.

	The item cache, cursor and (unless shared through ``history``) the undo
	stacks belong to this view alone.
	"""

	def __init__ (
		self,
		session: Session,
		group_id: str,
		kind: BlockViewKind,
		surface: tracksheet.surface.RenderSurface,
		group_instance: int = 0,
		history: typing.Optional[tracksheet.history.EditHistory] = None,
	) -> None:

		"""
		Lay out the view's fields.

		Parameters:
			session: Document, config and event channel.
			group_id: Group to display.
			kind: ``BlockViewKind.BLOCK`` or ``BlockViewKind.ORDER``.
			surface: Where to draw.
			group_instance: Which instance of the group to display.
			history: Undo/redo stacks; a private one is created when omitted.

		Raises:
			ConfigurationError: Missing or unknown group, bad kind, or a field
				with an unknown value kind.
		"""

		if not group_id:
			raise tracksheet.errors.ConfigurationError("BlockView requires a group_id")

		if not isinstance(kind, BlockViewKind):
			raise tracksheet.errors.ConfigurationError(f"Unknown view kind: {kind!r}")

		self.session = session
		self.group_id = group_id
		self.group_instance = group_instance
		self.kind = kind
		self.surface = surface
		self.history = history if history is not None else tracksheet.history.EditHistory(session.config.undo_depth)

		schema = session.document.schema
		group = schema.group(group_id)

		if kind is BlockViewKind.BLOCK:
			fields = [(field_id, block_id) for block_id, block_fields in group.blocks.items() for field_id in block_fields]
		else:
			fields = [(field_id, group.order_id) for field_id in group.order_fields]

		self.field_configs = tracksheet.layout.compute_field_configs(
			fields,
			schema,
			session.config.number_base,
			session.config.string_width,
		)

		self.cache = tracksheet.item_cache.ItemCache(len(self.field_configs))
		self.cursor = tracksheet.cursor.CursorModel(self.field_configs, self.cache)

		self._zone: typing.Optional[typing.Tuple[int, int]] = None
		self._focused: bool = False

		logger.info(f"Built {kind.value} view of {group_id}/{group_instance} with {len(self.field_configs)} fields")

	@property
	def focused (self) -> bool:

		return self._focused

	@property
	def _document (self) -> tracksheet.document.DocumentStore:

		return self.session.document

	# ------------------------------------------------------------------
	# Focus and status
	# ------------------------------------------------------------------

	def focus (self) -> None:

		"""Show the cursor and publish the status text for the field under it."""

		self._focused = True
		self.surface.show_cursor()
		self._publish_status()

	def unfocus (self) -> None:

		"""Hide the cursor and clear the status text."""

		self._focused = False
		self.surface.hide_cursor()
		self.session.emitter.emit(tracksheet.events.STATUS, "")

	def status_text (self) -> str:

		"""Label of the field under the cursor, e.g. ``NOTE1 (key): Note``."""

		field_id = self.current_field_id()

		if field_id is None:
			return self.group_id

		command = self._document.schema.command(field_id)
		label = f"{field_id} ({command.kind})"

		return f"{label}: {command.description}" if command.description else label

	def _publish_status (self) -> None:

		self.session.emitter.emit(tracksheet.events.STATUS, self.status_text())

	# ------------------------------------------------------------------
	# Incremental update
	# ------------------------------------------------------------------

	def update (self) -> None:

		"""
		Bring the grid in line with the document.

		Unchanged values draw nothing.  A different chunk shape rebuilds the
		whole grid.  Otherwise only the rows whose values changed are
		replaced, keeping the tags they carried.
		"""

		items = tracksheet.item_cache.get_item_list(self._document, self.group_id, self.group_instance, self.kind)

		if self.cache.matches(items):
			return

		if not self.cache.same_shape(items):
			self._rebuild(items)
			return

		try:
			self._patch_rows(items)
		except tracksheet.errors.ShapeMismatchError as exc:
			logger.debug(f"Falling back to a full rebuild of {self.group_id}: {exc}")
			self._rebuild(items)

	def _patch_rows (self, items: tracksheet.item_cache.ItemList) -> None:

		changed = self.cache.changed_rows(items)
		new_rows = [row for chunk in items for row in chunk]

		for row in changed:
			tags = self.surface.row_tags(row)
			self.surface.replace_row(row, self._format_row(new_rows[row]))
			for tag in tags:
				self.surface.add_tag(tag, row, row)

		self.cache.replace(items)

		logger.debug(f"Patched {len(changed)} rows of {self.group_id}")

	def _rebuild (self, items: tracksheet.item_cache.ItemList) -> None:

		row, column = self.cursor.row, self.cursor.column

		self.cache.replace(items)
		self.surface.replace_all([self._format_row(values) for values in self.cache.rows()])
		self.surface.set_row_numbers(self._row_numbers())
		self._tag_row_highlights()

		self.cursor.set(row, column)
		self._zone = None
		self._after_cursor_change()

		logger.debug(f"Rebuilt {self.kind.value} view of {self.group_id}: chunks {self.cache.shape}")

	def _format_row (self, values: typing.Sequence[typing.Any]) -> str:

		return tracksheet.layout.format_row(
			self.field_configs,
			self._document.schema,
			values,
			self.session.config.number_base,
		)

	def _row_numbers (self) -> typing.List[str]:

		"""Row labels: per chunk in Block views, running in Order views."""

		base = self.session.config.number_base
		spec = "X" if base == 16 else "d"

		if self.kind is BlockViewKind.ORDER:
			counts = [self.cache.total_rows]
		else:
			counts = list(self.cache.shape)

		largest = max((count - 1 for count in counts), default=0)
		width = max(_MIN_ROW_NUMBER_WIDTH, tracksheet.layout.digit_count(max(largest, 0), base))

		return [format(index, spec).rjust(width, "0") for count in counts for index in range(count)]

	def _tag_row_highlights (self) -> None:

		major = self.session.config.row_highlight_major
		minor = self.session.config.row_highlight_minor

		for start, end in self.cache.chunk_boundaries():
			for row in range(start, end + 1):
				offset = row - start
				if offset % major == 0:
					self.surface.add_tag(tracksheet.surface.ROW_HIGHLIGHT_MAJOR, row, row)
				elif offset % minor == 0:
					self.surface.add_tag(tracksheet.surface.ROW_HIGHLIGHT_MINOR, row, row)

	# ------------------------------------------------------------------
	# Cursor
	# ------------------------------------------------------------------

	def _after_cursor_change (self) -> None:

		"""Retag the active zone if the cursor left it, then place the surface cursor."""

		if self.cache.total_rows == 0:
			if self._zone is not None:
				self.surface.remove_tag(tracksheet.surface.ACTIVE_ZONE)
				self._zone = None
			return

		zone = self.cursor.active_zone()

		if zone != self._zone:
			self.surface.remove_tag(tracksheet.surface.ACTIVE_ZONE)
			self.surface.add_tag(tracksheet.surface.ACTIVE_ZONE, zone[0], zone[1])
			self._zone = zone

		self.surface.set_cursor(self.cursor.row, self.cursor.column, self.cursor.active_field().cursor_width)

	def _vertical_step (self) -> int:

		return self.session.edit_step if self.kind is BlockViewKind.BLOCK else 1

	def move_cursor (self, direction: Direction) -> None:

		"""Move the cursor; Left/Right also refresh the status text."""

		step = self._vertical_step() if direction in (Direction.UP, Direction.DOWN) else 1

		if self.cursor.move(direction, step):
			self._publish_status()

		self._after_cursor_change()

	def set_cursor (self, row: int, column: int) -> None:

		"""Place the cursor at ``(row, column)``, clamped to the grid and snapped to a stop."""

		self.cursor.set(row, column)
		self._after_cursor_change()

	def set_cursor_from_pointer (self, row_hint: int, column_hint: int) -> None:

		"""Place the cursor at the stop nearest to a pointer position."""

		self.set_cursor(row_hint, column_hint)
		self._publish_status()

	# ------------------------------------------------------------------
	# Read accessors
	# ------------------------------------------------------------------

	def current_field_id (self) -> typing.Optional[str]:

		if not self.field_configs:
			return None

		return self.cursor.active_field_id()

	def current_field_value (self) -> typing.Any:

		"""Cached value under the cursor, ``None`` when the grid is empty."""

		if self.cache.total_rows == 0 or not self.field_configs:
			return None

		field_index = self.field_configs.index(self.cursor.active_field())
		return self.cache.row(self.cursor.row)[field_index]

	def current_node_path (self) -> typing.Optional[str]:

		"""
		Path of the block instance under the cursor.

		``None`` when the grid is empty or the order entry references no
		instance of the active block.
		"""

		if self.cache.total_rows == 0:
			return None

		group = self._document.schema.group(self.group_id)

		if self.kind is BlockViewKind.ORDER:
			return self._document.node_path(self.group_id, self.group_instance, group.order_id, 0)

		entry = self._document.order_table(self.group_id, self.group_instance)[self.cursor.order_position()]
		block_id = self.cursor.active_block()
		instance = entry[1 + group.block_ids.index(block_id)]

		if not isinstance(instance, int) or isinstance(instance, bool):
			return None

		return self._document.node_path(self.group_id, self.group_instance, block_id, instance)

	def _edit_target (self) -> typing.Tuple[str, str, int]:

		"""``(parent_path, field_id, index)`` of the cell under the cursor."""

		path = self.current_node_path()

		if path is None:
			raise tracksheet.errors.NoOpEdit("No block instance under the cursor")

		index = self.cursor.row if self.kind is BlockViewKind.ORDER else self.cursor.field_instance()

		return path, self.cursor.active_field_id(), index

	# ------------------------------------------------------------------
	# Editing
	# ------------------------------------------------------------------

	def apply_action (self, action: tracksheet.actions.EditAction) -> bool:

		"""
		Apply a user edit through the history and redraw.

		Unsupported actions are reported as a ``"warning"`` event and leave
		the document untouched.  Returns True when the edit was applied.
		"""

		try:
			self.history.record(self._document, action)
		except tracksheet.errors.UnsupportedAction as exc:
			logger.warning(f"Edit aborted: {exc}")
			self.session.emitter.emit(tracksheet.events.WARNING, str(exc))
			return False

		self._after_edit()
		return True

	def _after_edit (self) -> None:

		self.update()
		self.session.emitter.emit(tracksheet.events.EDITED, self)

	def dispatch_entry (self, key_class: tracksheet.entry.KeyClass, key_value: typing.Any) -> bool:

		"""
		Enter a key into the field under the cursor.

		On success the cursor advances by the edit step.  Keys that do not
		apply to the active field are ignored.  Returns True when a value was
		entered.
		"""

		if self.cache.total_rows == 0:
			return False

		config = self.cursor.active_field()
		command = self._document.schema.command(config.field_id)

		try:
			path, field_id, index = self._edit_target()
			value = tracksheet.entry.entry_value(
				config,
				command,
				self.current_field_value(),
				self.cursor.digit_index(),
				key_class,
				key_value,
				self.session.config.number_base,
				self.session.config.base_octave,
			)
		except tracksheet.errors.NoOpEdit as exc:
			logger.debug(f"Ignored {key_class.value} key {key_value!r} in {config.field_id}: {exc}")
			return False

		if not self.apply_action(tracksheet.actions.SetAction(path, field_id, [(index, value)])):
			return False

		if config.type_tag == tracksheet.layout.NOTE_TAG:
			self.session.emitter.emit(tracksheet.events.NOTE_ENTERED, value, field_id)

		self.cursor.move(Direction.DOWN, self._vertical_step())
		self._after_cursor_change()

		return True

	def _edit_current (self, make_action: typing.Callable[[str, str, int], tracksheet.actions.EditAction], needs_value: bool) -> bool:

		if self.cache.total_rows == 0:
			return False

		try:
			if needs_value and self.current_field_value() in (None, []):
				raise tracksheet.errors.NoOpEdit("Cell is empty")
			path, field_id, index = self._edit_target()
		except tracksheet.errors.NoOpEdit as exc:
			logger.debug(f"Ignored edit in {self.current_field_id()}: {exc}")
			return False

		return self.apply_action(make_action(path, field_id, index))

	def cut_current_cell (self) -> bool:

		"""Remove the value under the cursor, shifting the field's later values up."""

		return self._edit_current(
			lambda path, field_id, index: tracksheet.actions.RemoveAction(path, field_id, [index]),
			needs_value = True,
		)

	def insert_cell (self) -> bool:

		"""Insert an empty value under the cursor, shifting the field's later values down."""

		return self._edit_current(
			lambda path, field_id, index: tracksheet.actions.InsertAction(path, field_id, [(index, None)]),
			needs_value = False,
		)

	def clear_current_cell (self) -> bool:

		"""Unset the value under the cursor."""

		return self._edit_current(
			lambda path, field_id, index: tracksheet.actions.SetAction(path, field_id, [(index, None)]),
			needs_value = True,
		)

	def undo (self) -> bool:

		"""Undo the latest edit.  Returns False when there is nothing to undo."""

		if not self.history.undo(self._document):
			return False

		self._after_edit()
		return True

	def redo (self) -> bool:

		"""Redo the latest undone edit.  Returns False when there is nothing to redo."""

		if not self.history.redo(self._document):
			return False

		self._after_edit()
		return True
