"""Edit actions: the only way the engine changes the document.

An edit is one of four actions:

- ``SetAction(parent_path, field_id, [(index, value), ...])``
- ``InsertAction(parent_path, field_id, [(index, value), ...])``
- ``RemoveAction(parent_path, field_id, [index, ...])``
- ``CompoundAction([action, ...])`` - members applied left to right.

``apply_edit()`` hands the first three to the store's mutation entry points
unchanged.  ``make_reverse_action()`` builds the action that undoes one, and
must be called *before* the action is applied, since it reads the values the
action is about to overwrite or remove.

Example:
	```python
	undo = make_reverse_action(doc, action)
	apply_edit(doc, action)
	apply_edit(doc, undo)   # doc is back where it started
	```
"""

import copy
import dataclasses
import logging
import typing

import tracksheet.document
import tracksheet.errors


logger = logging.getLogger(__name__)


@dataclasses.dataclass
class SetAction:

	parent_path: str
	field_id: str
	instances: typing.List[typing.Tuple[int, typing.Any]]


@dataclasses.dataclass
class InsertAction:

	parent_path: str
	field_id: str
	instances: typing.List[typing.Tuple[int, typing.Any]]


@dataclasses.dataclass
class RemoveAction:

	parent_path: str
	field_id: str
	instances: typing.List[int]


@dataclasses.dataclass
class CompoundAction:

	actions: typing.List["EditAction"] = dataclasses.field(default_factory=list)


EditAction = typing.Union[SetAction, InsertAction, RemoveAction, CompoundAction]

_PRIMITIVES = (SetAction, InsertAction, RemoveAction)


def check_supported (action: typing.Any) -> None:

	"""Raise ``UnsupportedAction`` if ``action`` (or any compound member) is not an edit action."""

	if isinstance(action, CompoundAction):
		for member in action.actions:
			check_supported(member)

	elif not isinstance(action, _PRIMITIVES):
		raise tracksheet.errors.UnsupportedAction(f"Unsupported edit action: {action!r}")


def apply_edit (document: tracksheet.document.DocumentStore, action: EditAction) -> None:

	"""
	Apply ``action`` to the document.

	The whole action tree is checked first, so an unsupported member leaves
	the document untouched.
	"""

	check_supported(action)
	_apply(document, action)


def _apply (document: tracksheet.document.DocumentStore, action: EditAction) -> None:

	if isinstance(action, CompoundAction):
		for member in action.actions:
			_apply(document, member)

	elif isinstance(action, SetAction):
		document.mutate_set(action.parent_path, action.field_id, action.instances)

	elif isinstance(action, InsertAction):
		document.mutate_insert(action.parent_path, action.field_id, action.instances)

	else:
		document.mutate_remove(action.parent_path, action.field_id, action.instances)


class _ShadowValues:

	"""
	Copies of the field lists an action touches, kept in step with the action.

	Compound members are inverted one after another; each one must see the
	values as its predecessors leave them, without touching the document.
	"""

	def __init__ (self, document: tracksheet.document.DocumentStore) -> None:

		self._document = document
		self._fields: typing.Dict[typing.Tuple[str, str], typing.List[typing.Any]] = {}

	def values (self, parent_path: str, field_id: str) -> typing.List[typing.Any]:

		key = (parent_path, field_id)

		if key not in self._fields:
			self._fields[key] = list(self._document.read_node_instance(f"{parent_path}/{field_id}"))

		return self._fields[key]

	def value (self, parent_path: str, field_id: str, index: int) -> typing.Any:

		values = self.values(parent_path, field_id)
		return copy.deepcopy(values[index]) if index < len(values) else None

	@staticmethod
	def _restore_length (
		action: SetAction,
		previous: typing.List[typing.Tuple[int, typing.Any]],
		old_length: int,
		new_length: int,
	) -> EditAction:

		"""Reverse of a Set: old values back in place, and any growth past the old end removed."""

		if new_length == old_length:
			return SetAction(action.parent_path, action.field_id, previous)

		trim = RemoveAction(action.parent_path, action.field_id, list(range(old_length, new_length)))

		if not previous:
			return trim

		return CompoundAction([SetAction(action.parent_path, action.field_id, previous), trim])

	def reverse (self, action: EditAction) -> EditAction:

		if isinstance(action, CompoundAction):
			members = [self.reverse(member) for member in action.actions]
			return CompoundAction(list(reversed(members)))

		if isinstance(action, SetAction):
			values = self.values(action.parent_path, action.field_id)
			length = len(values)
			previous = [
				(index, self.value(action.parent_path, action.field_id, index))
				for index, _ in action.instances
				if index < length
			]
			tracksheet.document.set_values(values, action.instances)
			return self._restore_length(action, previous, length, len(values))

		if isinstance(action, InsertAction):
			values = self.values(action.parent_path, action.field_id)
			# Old values are False; inserted values and padding end up non-False.
			marks: typing.List[typing.Any] = [False] * len(values)
			tracksheet.document.insert_values(marks, [(index, True) for index, _ in action.instances])
			tracksheet.document.insert_values(values, action.instances)
			added = [index for index, mark in enumerate(marks) if mark is not False]
			return RemoveAction(action.parent_path, action.field_id, added)

		if isinstance(action, RemoveAction):
			length = len(self.values(action.parent_path, action.field_id))
			indices = sorted(index for index in set(action.instances) if index < length)
			removed = [(index, self.value(action.parent_path, action.field_id, index)) for index in indices]
			tracksheet.document.remove_values(self.values(action.parent_path, action.field_id), indices)
			return InsertAction(action.parent_path, action.field_id, removed)

		raise tracksheet.errors.UnsupportedAction(f"Unsupported edit action: {action!r}")


def make_reverse_action (document: tracksheet.document.DocumentStore, action: EditAction) -> EditAction:

	"""
	Build the action that undoes ``action``.  Call before applying ``action``.

	- Set → Set of the previous values at the same indices, plus a Remove of
	  whatever the Set appended past the old end of the field.
	- Insert → Remove of the final positions of the inserted values and of
	  any padding the insert added.
	- Remove → Insert of the removed values at their old indices.
	- Compound → Compound of the member inverses in reverse order.

	Reads the document but never changes it.
	"""

	reverse = _ShadowValues(document).reverse(action)
	logger.debug(f"Reverse of {type(action).__name__} is {type(reverse).__name__}")

	return reverse
