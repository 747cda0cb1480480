import pytest

import tracksheet.actions
import tracksheet.document
import tracksheet.errors
import tracksheet.schema

import conftest


CH1_0 = "PATTERNS/0/CH1/0"
META_0 = "INFO/0/META/0"


def _round_trip (document: tracksheet.document.ModuleDocument, action: tracksheet.actions.EditAction) -> None:

	"""Apply ``action`` then its reverse and check the document is unchanged."""

	before = conftest.observe(document)
	reverse = tracksheet.actions.make_reverse_action(document, action)

	assert conftest.observe(document) == before

	tracksheet.actions.apply_edit(document, action)
	tracksheet.actions.apply_edit(document, reverse)

	assert conftest.observe(document) == before


def test_set_on_unset_value () -> None:

	"""Setting a never-written value reverses to removing it again."""

	schema = tracksheet.schema.ModuleSchema(
		{"F1": tracksheet.schema.Command(kind="uint")},
		[tracksheet.schema.GroupDef("G", {"B": ["F1"]})],
	)
	document = tracksheet.document.ModuleDocument(schema)
	action = tracksheet.actions.SetAction("G/0/B/0", "F1", [(0, 5)])

	reverse = tracksheet.actions.make_reverse_action(document, action)
	tracksheet.actions.apply_edit(document, action)

	assert reverse == tracksheet.actions.RemoveAction("G/0/B/0", "F1", [0])
	assert document.read_node_instance("G/0/B/0/F1/0") == 5

	tracksheet.actions.apply_edit(document, reverse)

	assert document.read_node_instance("G/0/B/0/F1") == []


def test_set_reverse_restores_previous_values (document: tracksheet.document.ModuleDocument) -> None:

	action = tracksheet.actions.SetAction(CH1_0, "VOL", [(0, 0x7F), (1, 0x10)])

	reverse = tracksheet.actions.make_reverse_action(document, action)

	assert reverse == tracksheet.actions.SetAction(CH1_0, "VOL", [(0, 0x40), (1, None)])
	_round_trip(document, action)


def test_insert_reverses_to_remove (document: tracksheet.document.ModuleDocument) -> None:

	action = tracksheet.actions.InsertAction(CH1_0, "NOTE", [(2, "x"), (0, "y")])

	reverse = tracksheet.actions.make_reverse_action(document, action)

	assert reverse == tracksheet.actions.RemoveAction(CH1_0, "NOTE", [0, 2])
	_round_trip(document, action)


def test_insert_at_repeated_index (document: tracksheet.document.ModuleDocument) -> None:

	"""Values inserted at the same index land on distinct rows, and all of them are removed again."""

	action = tracksheet.actions.InsertAction(CH1_0, "VOL", [(0, 1), (0, 2)])

	reverse = tracksheet.actions.make_reverse_action(document, action)

	assert reverse == tracksheet.actions.RemoveAction(CH1_0, "VOL", [0, 1])
	_round_trip(document, action)
	assert document.read_node_instance(f"{CH1_0}/VOL") == [0x40, None]


def test_set_past_the_end_is_trimmed_again (document: tracksheet.document.ModuleDocument) -> None:

	"""The reverse of a Set that grew the field removes the growth, padding included."""

	action = tracksheet.actions.SetAction(CH1_0, "VOL", [(4, 7)])

	reverse = tracksheet.actions.make_reverse_action(document, action)

	assert reverse == tracksheet.actions.RemoveAction(CH1_0, "VOL", [2, 3, 4])
	_round_trip(document, action)
	assert document.read_node_instance(f"{CH1_0}/VOL") == [0x40, None]


def test_set_inside_and_past_the_end (document: tracksheet.document.ModuleDocument) -> None:

	action = tracksheet.actions.SetAction(CH1_0, "VOL", [(0, 1), (3, 2)])

	reverse = tracksheet.actions.make_reverse_action(document, action)

	assert reverse == tracksheet.actions.CompoundAction([
		tracksheet.actions.SetAction(CH1_0, "VOL", [(0, 0x40)]),
		tracksheet.actions.RemoveAction(CH1_0, "VOL", [2, 3]),
	])
	_round_trip(document, action)


def test_insert_past_the_end_removes_padding (document: tracksheet.document.ModuleDocument) -> None:

	action = tracksheet.actions.InsertAction(CH1_0, "NOTE", [(4, "a4")])

	reverse = tracksheet.actions.make_reverse_action(document, action)

	assert reverse == tracksheet.actions.RemoveAction(CH1_0, "NOTE", [2, 3, 4])
	_round_trip(document, action)
	assert document.read_node_instance(f"{CH1_0}/NOTE") == ["c4", None]


def test_order_rows_past_the_end_round_trip (document: tracksheet.document.ModuleDocument) -> None:

	"""Growing one order field does not leave extra order rows behind."""

	_round_trip(document, tracksheet.actions.SetAction("PATTERNS/0/PATTERNS_ORDER/0", "ROWS", [(4, 2)]))
	_round_trip(document, tracksheet.actions.InsertAction("PATTERNS/0/PATTERNS_ORDER/0", "R_CH1", [(3, 1), (3, 0)]))

	assert document.order_table("PATTERNS", 0) == [(2, 0, 0), (3, 0, 1)]


def test_remove_reverses_to_insert (document: tracksheet.document.ModuleDocument) -> None:

	"""Removed values come back at their old indices; out-of-range indices are dropped."""

	document.mutate_set(CH1_0, "VOL", [(1, 1), (2, 2), (3, 3)])
	action = tracksheet.actions.RemoveAction(CH1_0, "VOL", [3, 1, 1, 9])

	reverse = tracksheet.actions.make_reverse_action(document, action)

	assert reverse == tracksheet.actions.InsertAction(CH1_0, "VOL", [(1, 1), (3, 3)])
	_round_trip(document, action)


def test_remove_of_blank_value_round_trips (document: tracksheet.document.ModuleDocument) -> None:

	"""An explicitly blank value is restored as blank, not as unset."""

	document.mutate_set(META_0, "TITLE", [(1, [])])

	_round_trip(document, tracksheet.actions.RemoveAction(META_0, "TITLE", [1]))

	assert document.read_node_instance(f"{META_0}/TITLE/1") == []


def test_compound_on_the_same_cells (document: tracksheet.document.ModuleDocument) -> None:

	"""Members that touch the same values are inverted against each other's results."""

	action = tracksheet.actions.CompoundAction([
		tracksheet.actions.SetAction(CH1_0, "NOTE", [(0, "d4")]),
		tracksheet.actions.InsertAction(CH1_0, "NOTE", [(0, "e4")]),
		tracksheet.actions.SetAction(CH1_0, "NOTE", [(1, "f4")]),
		tracksheet.actions.RemoveAction(CH1_0, "NOTE", [0]),
	])

	reverse = tracksheet.actions.make_reverse_action(document, action)
	tracksheet.actions.apply_edit(document, action)

	assert document.read_node_instance(f"{CH1_0}/NOTE") == ["f4", None]
	assert isinstance(reverse, tracksheet.actions.CompoundAction)
	assert isinstance(reverse.actions[0], tracksheet.actions.InsertAction)

	tracksheet.actions.apply_edit(document, reverse)

	assert conftest.observe(document) == conftest.observe(conftest.make_document())


def test_nested_compound_round_trips (document: tracksheet.document.ModuleDocument) -> None:

	action = tracksheet.actions.CompoundAction([
		tracksheet.actions.RemoveAction(CH1_0, "FX", [0]),
		tracksheet.actions.CompoundAction([
			tracksheet.actions.InsertAction(CH1_0, "FX", [(0, "vib"), (3, "vol")]),
			tracksheet.actions.SetAction(CH1_0, "FX", [(1, None)]),
		]),
		tracksheet.actions.SetAction("PATTERNS/0/PATTERNS_ORDER/0", "ROWS", [(0, 4)]),
	])

	_round_trip(document, action)


def test_empty_compound_round_trips (document: tracksheet.document.ModuleDocument) -> None:

	_round_trip(document, tracksheet.actions.CompoundAction([]))


def test_unsupported_action_leaves_document_unchanged (document: tracksheet.document.ModuleDocument) -> None:

	"""One bad member rejects the whole compound before anything is applied."""

	before = conftest.observe(document)
	action = tracksheet.actions.CompoundAction([
		tracksheet.actions.SetAction(CH1_0, "NOTE", [(0, "d4")]),
		("move", CH1_0),
	])

	with pytest.raises(tracksheet.errors.UnsupportedAction):
		tracksheet.actions.apply_edit(document, action)

	with pytest.raises(tracksheet.errors.UnsupportedAction):
		tracksheet.actions.make_reverse_action(document, action)

	assert conftest.observe(document) == before
