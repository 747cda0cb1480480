"""Synchronous event emitter connecting the engine to the host UI shell.

The engine never calls into the host directly.  It emits named events and the
host (status bar, toolbar, audio trigger) subscribes to the ones it cares about.
All callbacks run immediately on the calling thread.
"""

import typing


CallbackType = typing.Callable[..., typing.Any]

#: Status text for the currently addressed field (``str``).
STATUS = "status"

#: Human-readable warning for the host shell (``str``).
WARNING = "warning"

#: A view changed the document (the ``BlockView`` that made the change).
EDITED = "edited"

#: A note was entered (note name ``str``, field id ``str``).
NOTE_ENTERED = "note_entered"


class EventEmitter:

	"""
	A minimal synchronous event emitter.
	"""

	def __init__ (self) -> None:

		"""
		Initialize an empty event registry.
		"""

		self._listeners: typing.Dict[str, typing.List[CallbackType]] = {}


	def on (self, event_name: str, callback: CallbackType) -> None:

		"""
		Register a callback for an event name.
		"""

		self._listeners.setdefault(event_name, []).append(callback)

	def off (self, event_name: str, callback: CallbackType) -> None:

		"""
		Unregister a previously registered callback.

		Raises ``ValueError`` if the callback is not registered for the event.
		"""

		if callback not in self._listeners.get(event_name, []):
			raise ValueError(f"Callback not registered for event {event_name!r}")

		self._listeners[event_name].remove(callback)


	def emit (self, event_name: str, *args: typing.Any, **kwargs: typing.Any) -> None:

		"""
		Call every listener registered for ``event_name`` in registration order.
		"""

		# Copy so a listener may unsubscribe itself while being called.
		for callback in list(self._listeners.get(event_name, [])):
			callback(*args, **kwargs)
