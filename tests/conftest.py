import typing

import mido
import pytest

import tracksheet.block_view
import tracksheet.config
import tracksheet.document
import tracksheet.note_table
import tracksheet.schema
import tracksheet.surface


class FakeMidiOut:

	"""MIDI output stub that records what it is sent."""

	def __init__ (self) -> None:

		self.sent: typing.List[mido.Message] = []
		self.closed = False

	def send (self, message: mido.Message) -> None:

		"""Record an outgoing MIDI message."""

		self.sent.append(message)

	def close (self) -> None:

		"""Mark the fake device closed."""

		self.closed = True


# Module-level reference so tests can inspect the most recently opened output.
_current_fake_output: typing.Optional[FakeMidiOut] = None


def _fake_get_output_names () -> list[str]:

	"""Return a fixed list of MIDI output names for tests."""

	return ["Dummy MIDI"]


def _fake_open_output (name: str) -> FakeMidiOut:

	"""Return a fake MIDI output regardless of the name."""

	global _current_fake_output
	_current_fake_output = FakeMidiOut()
	return _current_fake_output


def current_fake_output () -> typing.Optional[FakeMidiOut]:

	return _current_fake_output


@pytest.fixture
def patch_midi (monkeypatch: pytest.MonkeyPatch) -> None:

	"""Patch mido to use a fake MIDI output for all tests that need it."""

	monkeypatch.setattr(mido, "get_output_names", _fake_get_output_names)
	monkeypatch.setattr(mido, "open_output", _fake_open_output)


def make_schema () -> tracksheet.schema.ModuleSchema:

	"""
	Test module schema.

	``PATTERNS`` has a drum block (one trigger) and a melodic block (note,
	8-bit volume, effect key).  ``INFO`` has a string title, a signed speed
	and a reference into ``PATTERNS``-style blocks.
	"""

	return tracksheet.schema.ModuleSchema(
		commands = {
			"KICK": tracksheet.schema.Command(kind="trigger", description="Kick drum"),
			"NOTE": tracksheet.schema.Command(
				kind = "key",
				keys = tracksheet.note_table.make_note_table("c1", "b7"),
				is_note = True,
				description = "Note",
			),
			"VOL": tracksheet.schema.Command(kind="uint", bits=8, description="Volume"),
			"FX": tracksheet.schema.Command(kind="key", keys={"arp": 1, "vib": 2, "vol": 3}, description="Effect"),
			"TITLE": tracksheet.schema.Command(kind="string"),
			"SPEED": tracksheet.schema.Command(kind="int", bits=8, description="Speed"),
		},
		groups = [
			tracksheet.schema.GroupDef("PATTERNS", {"DRUMS": ["KICK"], "CH1": ["NOTE", "VOL", "FX"]}),
			tracksheet.schema.GroupDef("INFO", {"META": ["TITLE", "SPEED"]}),
		],
	)


def make_document (edit_step: int = 0) -> tracksheet.document.ModuleDocument:

	"""
	Test module with two PATTERNS chunks of 2 and 3 rows.

	Item list of the Block view::

		row 0  [True, "c4", 0x40, None ]   chunk 0 (DRUMS 0, CH1 0)
		row 1  [None, None, None, "arp"]
		row 2  [True, "e4", 0x20, "vib"]   chunk 1 (DRUMS 0, CH1 1)
		row 3  [None, None, None, None ]
		row 4  [True, None, None, None ]
	"""

	document = tracksheet.document.ModuleDocument(make_schema(), edit_step=edit_step)

	document.set_block_rows("PATTERNS", 0, "DRUMS", 0, [[True], [None], [True]])
	document.set_block_rows("PATTERNS", 0, "CH1", 0, [["c4", 0x40, None], [None, None, "arp"]])
	document.set_block_rows("PATTERNS", 0, "CH1", 1, [["e4", 0x20, "vib"]])
	document.set_order("PATTERNS", 0, [(2, 0, 0), (3, 0, 1)])

	document.set_block_rows("INFO", 0, "META", 0, [["song", -2], [None, 5]])
	document.set_order("INFO", 0, [(2, 0)])

	return document


@pytest.fixture
def document () -> tracksheet.document.ModuleDocument:

	return make_document()


@pytest.fixture
def session (document: tracksheet.document.ModuleDocument) -> tracksheet.block_view.Session:

	return tracksheet.block_view.Session(document, tracksheet.config.EditorConfig())


@pytest.fixture
def block_view (session: tracksheet.block_view.Session) -> tracksheet.block_view.BlockView:

	"""A drawn Block view of PATTERNS on a fresh ``TextSurface``."""

	view = tracksheet.block_view.BlockView(
		session,
		"PATTERNS",
		tracksheet.block_view.BlockViewKind.BLOCK,
		tracksheet.surface.TextSurface(),
	)
	view.update()
	return view


@pytest.fixture
def order_view (session: tracksheet.block_view.Session) -> tracksheet.block_view.BlockView:

	"""A drawn Order view of PATTERNS on a fresh ``TextSurface``."""

	view = tracksheet.block_view.BlockView(
		session,
		"PATTERNS",
		tracksheet.block_view.BlockViewKind.ORDER,
		tracksheet.surface.TextSurface(),
	)
	view.update()
	return view


def observe (document: tracksheet.document.ModuleDocument, instances: int = 4) -> typing.Dict[str, typing.Any]:

	"""
	Everything the store reports for the test schema, read through its own interface.

	Every field list of block instances ``0..instances-1`` plus each group's
	order table.  Unlike ``snapshot()``, trailing ``None`` values count.
	"""

	observed: typing.Dict[str, typing.Any] = {}

	for group_id, group in document.schema.groups.items():
		observed[group_id] = document.order_table(group_id, 0)

		blocks = dict(group.blocks)
		blocks[group.order_id] = group.order_fields

		for block_id, fields in blocks.items():
			for instance in range(instances):
				path = document.node_path(group_id, 0, block_id, instance)
				for field_id in fields:
					observed[f"{path}/{field_id}"] = document.read_node_instance(f"{path}/{field_id}")

	return observed
