"""Undo and redo stacks for edit actions."""

import collections
import logging
import typing

import tracksheet.actions
import tracksheet.document


logger = logging.getLogger(__name__)


class EditHistory:

	"""
	Undo/redo stacks holding inverse edit actions.

	Every user edit goes through :meth:`record`, which computes the inverse
	*before* applying the edit.  :meth:`undo` and :meth:`redo` move actions
	between the stacks, each time computing the counter-action before
	applying.  The undo stack keeps at most ``depth`` entries; the oldest are
	dropped first.
	"""

	def __init__ (self, depth: int = 100) -> None:

		self._undo: typing.Deque[tracksheet.actions.EditAction] = collections.deque(maxlen=depth)
		self._redo: typing.List[tracksheet.actions.EditAction] = []

	@property
	def can_undo (self) -> bool:

		return bool(self._undo)

	@property
	def can_redo (self) -> bool:

		return bool(self._redo)

	def record (self, document: tracksheet.document.DocumentStore, action: tracksheet.actions.EditAction) -> None:

		"""
		Apply a user edit, keeping its inverse for undo.

		Clears the redo stack.  Raises ``UnsupportedAction`` (leaving both
		stacks and the document unchanged) for unknown actions.
		"""

		tracksheet.actions.check_supported(action)
		reverse = tracksheet.actions.make_reverse_action(document, action)

		self._undo.append(reverse)
		self._redo.clear()

		tracksheet.actions.apply_edit(document, action)

	def undo (self, document: tracksheet.document.DocumentStore) -> bool:

		"""Undo the latest edit.  Returns False when there is nothing to undo."""

		if not self._undo:
			return False

		action = self._undo.pop()
		self._redo.append(tracksheet.actions.make_reverse_action(document, action))
		tracksheet.actions.apply_edit(document, action)

		logger.debug(f"Undo ({len(self._undo)} left)")

		return True

	def redo (self, document: tracksheet.document.DocumentStore) -> bool:

		"""Redo the latest undone edit.  Returns False when there is nothing to redo."""

		if not self._redo:
			return False

		action = self._redo.pop()
		self._undo.append(tracksheet.actions.make_reverse_action(document, action))
		tracksheet.actions.apply_edit(document, action)

		logger.debug(f"Redo ({len(self._redo)} left)")

		return True

	def clear (self) -> None:

		self._undo.clear()
		self._redo.clear()
