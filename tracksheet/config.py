"""Editor configuration loaded from YAML.

The configuration collaborator owns display and editing preferences that the
engine consumes read-only: the numeric base used for display, the default
edit step, the octave used for note entry, row highlight spacing and the
note preview port.

```yaml
editor:
  number_base: 16
  edit_step: 1
  base_octave: 4
preview:
  device_name: "Dummy MIDI"
```
"""

import dataclasses
import logging
import os
import typing

import yaml

import tracksheet.errors


logger = logging.getLogger(__name__)


SUPPORTED_BASES = (10, 16)


@dataclasses.dataclass
class EditorConfig:

	"""
	Display and editing preferences shared by every view in a session.

	Attributes:
		number_base: Base used to display and enter numeric values (10 or 16).
		edit_step: Rows the cursor advances after a committed edit when the
			document does not set its own edit step.
		base_octave: Octave that note entry offsets are relative to.
		string_width: Display width of string fields.
		row_highlight_major: Spacing of major row highlights within a chunk.
		row_highlight_minor: Spacing of minor row highlights within a chunk.
		undo_depth: Maximum number of undo steps kept.
		preview_device: MIDI output used for note preview, or ``None`` to disable it.
		preview_channel: MIDI channel (0-15) for note preview.
		preview_velocity: MIDI velocity for note preview.
	"""

	number_base: int = 16
	edit_step: int = 1
	base_octave: int = 4
	string_width: int = 16
	row_highlight_major: int = 8
	row_highlight_minor: int = 4
	undo_depth: int = 100
	preview_device: typing.Optional[str] = None
	preview_channel: int = 0
	preview_velocity: int = 100

	def __post_init__ (self) -> None:

		"""Reject values the layout and cursor models cannot work with."""

		if self.number_base not in SUPPORTED_BASES:
			raise tracksheet.errors.ConfigurationError(
				f"number_base must be one of {SUPPORTED_BASES}, got {self.number_base!r}"
			)

		for name in ("string_width", "row_highlight_major", "row_highlight_minor", "undo_depth"):
			if getattr(self, name) < 1:
				raise tracksheet.errors.ConfigurationError(f"{name} must be at least 1")

		if self.edit_step < 0:
			raise tracksheet.errors.ConfigurationError("edit_step must not be negative")

		if not 0 <= self.preview_channel <= 15:
			raise tracksheet.errors.ConfigurationError("preview_channel must be between 0 and 15")


def config_from_dict (data: typing.Optional[typing.Dict[str, typing.Any]]) -> EditorConfig:

	"""
	Build an ``EditorConfig`` from the nested ``editor``/``preview`` mapping.

	Unknown keys raise ``ConfigurationError`` so typos do not pass silently.
	"""

	data = data or {}
	editor = dict(data.get("editor") or {})
	preview = data.get("preview") or {}

	known = {f.name for f in dataclasses.fields(EditorConfig)}
	unknown = [key for key in editor if key not in known or key.startswith("preview_")]

	if unknown:
		raise tracksheet.errors.ConfigurationError(f"Unknown editor settings: {sorted(unknown)}")

	for key in ("device_name", "channel", "velocity"):
		if key in preview:
			field_name = "preview_device" if key == "device_name" else f"preview_{key}"
			editor[field_name] = preview[key]

	return EditorConfig(**editor)


def load_config (config_path: str = "tracksheet.yaml") -> EditorConfig:

	"""
	Load configuration from a YAML file, falling back to defaults when it is missing.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return EditorConfig()

	with open(config_path, "r") as f:
		data = yaml.safe_load(f)

	if data is not None and not isinstance(data, dict):
		raise tracksheet.errors.ConfigurationError(f"Config file {config_path} must contain a mapping")

	config = config_from_dict(data)
	logger.info(f"Loaded config from {config_path} (base {config.number_base})")

	return config
