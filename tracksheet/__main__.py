import logging
import sys

import tracksheet.block_view
import tracksheet.config
import tracksheet.document
import tracksheet.entry
import tracksheet.events
import tracksheet.group_view
import tracksheet.note_table
import tracksheet.preview
import tracksheet.schema
import tracksheet.surface


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def demo_document () -> tracksheet.document.ModuleDocument:

	"""
	A small two-block module: a drum block and a melodic channel, two order entries.
	"""

	schema = tracksheet.schema.ModuleSchema(
		commands = {
			"KICK": tracksheet.schema.Command(kind="trigger", description="Kick drum"),
			"SNARE": tracksheet.schema.Command(kind="trigger", description="Snare drum"),
			"NOTE": tracksheet.schema.Command(
				kind = "key",
				keys = tracksheet.note_table.make_note_table("c2", "b6"),
				is_note = True,
				description = "Note",
			),
			"INST": tracksheet.schema.Command(kind="uint", bits=4, description="Instrument"),
			"FX": tracksheet.schema.Command(kind="key", keys={"arp": 1, "sld": 2, "vib": 3}, description="Effect"),
		},
		groups = [
			tracksheet.schema.GroupDef("PATTERNS", {"DRUMS": ["KICK", "SNARE"], "CH1": ["NOTE", "INST", "FX"]}),
		],
	)

	document = tracksheet.document.ModuleDocument(schema)

	document.set_block_rows("PATTERNS", 0, "DRUMS", 0, [
		[True, None], [None, None], [None, True], [None, None],
	])
	document.set_block_rows("PATTERNS", 0, "CH1", 0, [
		["c4", 1, None], [None, None, None], ["e4", 1, "arp"], ["g4", 2, None],
	])
	document.set_block_rows("PATTERNS", 0, "CH1", 1, [
		["a3", 2, "vib"], ["rest", None, None],
	])
	document.set_order("PATTERNS", 0, [(4, 0, 0), (4, 0, 1)])

	return document


def main () -> None:

	"""
	Build the demo module, make a few edits and print both views.
	"""

	config_path = sys.argv[1] if len(sys.argv) > 1 else "tracksheet.yaml"
	config = tracksheet.config.load_config(config_path)

	session = tracksheet.block_view.Session(demo_document(), config)
	session.emitter.on(tracksheet.events.STATUS, lambda text: logger.info(f"Status: {text}"))

	preview = None

	if config.preview_device is not None:
		preview = tracksheet.preview.NotePreview(
			session.emitter,
			config.preview_device,
			config.preview_channel,
			config.preview_velocity,
		)
		preview.start()

	blocks = tracksheet.surface.TextSurface()
	order = tracksheet.surface.TextSurface()
	group = tracksheet.group_view.GroupView(session, "PATTERNS", blocks, order)

	group.update()
	group.focus()

	view = group.blocks
	view.set_cursor_from_pointer(1, view.field_configs[2].start_offset)
	view.dispatch_entry(tracksheet.entry.KeyClass.NOTE, 2)
	view.move_cursor(tracksheet.block_view.Direction.RIGHT)
	view.dispatch_entry(tracksheet.entry.KeyClass.DIGIT, "3")

	print(blocks.render())
	print()
	print(order.render())

	if preview is not None:
		preview.stop()


if __name__ == "__main__":
	main()
