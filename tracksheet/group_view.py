"""A group's pair of views: its blocks and its order table.

Editing the order table changes which block instances the Block view shows
(and how many rows each chunk has), so the two views share one edit history
and each redraws whenever the other changes the document.
"""

import logging
import typing

import tracksheet.block_view
import tracksheet.events
import tracksheet.history
import tracksheet.surface


logger = logging.getLogger(__name__)


class GroupView:

	"""
	Block and Order views of one group instance, with a single focused view.

	Example:
		```python
		group = GroupView(session, "PATTERNS", TextSurface(), TextSurface())
		group.update()
		group.focus()                  # focuses the Block view
		group.focus_next()             # moves focus to the Order view
		```
	"""

	def __init__ (
		self,
		session: tracksheet.block_view.Session,
		group_id: str,
		block_surface: tracksheet.surface.RenderSurface,
		order_surface: tracksheet.surface.RenderSurface,
		group_instance: int = 0,
	) -> None:

		self.session = session
		self.history = tracksheet.history.EditHistory(session.config.undo_depth)

		self.blocks = tracksheet.block_view.BlockView(
			session,
			group_id,
			tracksheet.block_view.BlockViewKind.BLOCK,
			block_surface,
			group_instance,
			history = self.history,
		)

		self.order = tracksheet.block_view.BlockView(
			session,
			group_id,
			tracksheet.block_view.BlockViewKind.ORDER,
			order_surface,
			group_instance,
			history = self.history,
		)

		self._views: typing.List[tracksheet.block_view.BlockView] = [self.blocks, self.order]
		self._focus_index: typing.Optional[int] = None

		session.emitter.on(tracksheet.events.EDITED, self._on_edited)

	def close (self) -> None:

		"""Stop listening for edits."""

		self.session.emitter.off(tracksheet.events.EDITED, self._on_edited)

	def _on_edited (self, view: tracksheet.block_view.BlockView) -> None:

		if view not in self._views:
			return

		for other in self._views:
			if other is not view:
				other.update()

	def update (self) -> None:

		for view in self._views:
			view.update()

	@property
	def focused_view (self) -> typing.Optional[tracksheet.block_view.BlockView]:

		if self._focus_index is None:
			return None

		return self._views[self._focus_index]

	def focus (self, index: int = 0) -> None:

		"""Focus the Block view (0) or the Order view (1), unfocusing the other."""

		if self._focus_index is not None and self._focus_index != index:
			self._views[self._focus_index].unfocus()

		self._focus_index = index
		self._views[index].focus()

	def focus_next (self) -> None:

		"""Move focus to the other view."""

		self.focus(0 if self._focus_index is None else (self._focus_index + 1) % len(self._views))

	def unfocus (self) -> None:

		if self._focus_index is not None:
			self._views[self._focus_index].unfocus()
			self._focus_index = None

	def undo (self) -> bool:

		"""Undo the latest edit made in either view."""

		return (self.focused_view or self.blocks).undo()

	def redo (self) -> bool:

		return (self.focused_view or self.blocks).redo()
