"""Exception types raised by the BlockView engine and its collaborators.

- ``ConfigurationError`` - bad schema or config, raised at construction and never recovered.
- ``ShapeMismatchError`` - an item list disagrees with the expected grid shape.  Caught by
  ``BlockView.update()``, which falls back to a full rebuild.
- ``NoOpEdit`` - an edit gesture on a cell that has nothing to edit.  Silently ignored.
- ``UnsupportedAction`` - an unknown edit action reached the dispatcher.  Reported as a warning.
"""


class ConfigurationError(Exception):
	pass


class ShapeMismatchError(Exception):
	pass


class NoOpEdit(Exception):
	pass


class UnsupportedAction(Exception):
	pass
