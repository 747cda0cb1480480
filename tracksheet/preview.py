"""Note preview: sound entered notes on a MIDI output.

The editor does not synthesise audio.  When a note is entered it only
triggers playback by sending MIDI to whatever is listening on the preview
port (a hardware synth, a soft synth, the emulator of the target machine).
Each new note silences the previous one, the way a tracker channel does.

```python
preview = NotePreview(session.emitter, device_name="Dummy MIDI")
preview.start()
...
preview.stop()
```
"""

import logging
import typing

import mido

import tracksheet.events
import tracksheet.note_table


logger = logging.getLogger(__name__)


class NotePreview:

	"""Send ``note_on``/``note_off`` for every ``"note_entered"`` event."""

	def __init__ (
		self,
		emitter: tracksheet.events.EventEmitter,
		device_name: typing.Optional[str] = None,
		channel: int = 0,
		velocity: int = 100,
	) -> None:

		"""
		Parameters:
			emitter: Event channel the views emit on.
			device_name: MIDI output to open; ``None`` opens the only output
				when exactly one exists.
			channel: MIDI channel (0-15).
			velocity: Note-on velocity.
		"""

		self._emitter = emitter
		self.device_name = device_name
		self.channel = channel
		self.velocity = velocity

		self._port: typing.Optional[typing.Any] = None
		self._sounding: typing.Optional[int] = None

	@property
	def active (self) -> bool:

		return self._port is not None

	def start (self) -> bool:

		"""Open the output port and start listening.  Returns False if no port could be opened."""

		if self._port is not None:
			return True

		try:
			outputs = mido.get_output_names()

			if self.device_name is None and len(outputs) == 1:
				name = outputs[0]
			elif self.device_name in outputs:
				name = self.device_name
			else:
				logger.error(f"MIDI output '{self.device_name}' not found. Available devices: {outputs}")
				return False

			self._port = mido.open_output(name)

		except OSError as exc:
			logger.error(f"Failed to open MIDI output: {exc}")
			return False

		self._emitter.on(tracksheet.events.NOTE_ENTERED, self._on_note_entered)
		logger.info(f"Note preview on '{name}', channel {self.channel + 1}")

		return True

	def stop (self) -> None:

		"""Silence the sounding note, stop listening and close the port."""

		if self._port is None:
			return

		self._silence()
		self._emitter.off(tracksheet.events.NOTE_ENTERED, self._on_note_entered)
		self._port.close()
		self._port = None

	def _silence (self) -> None:

		if self._port is not None and self._sounding is not None:
			self._port.send(mido.Message("note_off", channel=self.channel, note=self._sounding, velocity=0))
			self._sounding = None

	def _on_note_entered (self, name: str, field_id: str) -> None:

		if self._port is None:
			return

		self._silence()

		if name == tracksheet.note_table.REST:
			return

		note = tracksheet.note_table.midi_number(name)

		if not 0 <= note <= 127:
			logger.debug(f"{name} in {field_id} is outside the MIDI range")
			return

		self._port.send(mido.Message("note_on", channel=self.channel, note=note, velocity=self.velocity))
		self._sounding = note
