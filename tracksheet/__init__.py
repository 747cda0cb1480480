"""
Tracksheet - the grid editing engine of a tracker-style music sequence editor.

Tracker modules are made of groups of blocks (patterns, channels, drum
tracks) played in the sequence given by each group's order table.  Tracksheet
provides the engine behind the spreadsheet-like grid a tracker edits them
in, independent of any GUI toolkit:

- **Field layout.** Column widths, offsets and cursor stops computed from
  the module schema, in hexadecimal or decimal.
- **Block and order views.** A ``BlockView`` shows either the blocks of a
  group side by side (one chunk of rows per order entry) or the order table
  itself.  ``GroupView`` pairs the two and keeps them in sync.
- **Cursor navigation.** Row and digit-wise movement with wrap-around,
  chunk jumps, pointer placement and edit-step advance.
- **Edits with exact undo.** Every change is a ``set``, ``insert``,
  ``remove`` or ``compound`` action; each is recorded with its inverse so
  undo and redo restore the document exactly.
- **Incremental redraw.** After an edit the grid redraws only the rows that
  changed, or rebuilds when the order shape changed.
- **Note preview.** Entered notes can be sounded on a MIDI output.

The document store and the render surface are collaborators:
``ModuleDocument`` and ``TextSurface`` are in-memory implementations you
can use directly or replace with your own.

Minimal example:

    ```python
    import tracksheet

    session = tracksheet.Session(document)
    view = tracksheet.BlockView(session, "PATTERNS", tracksheet.BlockViewKind.BLOCK, tracksheet.TextSurface())
    view.update()
    view.focus()
    view.dispatch_entry(tracksheet.KeyClass.NOTE, 0)
    print(view.surface.render())
    ```

Package-level exports: ``BlockView``, ``BlockViewKind``, ``Direction``,
``EditorConfig``, ``GroupView``, ``KeyClass``, ``ModuleDocument``,
``Session``, ``TextSurface``.
"""

import tracksheet.block_view
import tracksheet.config
import tracksheet.document
import tracksheet.entry
import tracksheet.group_view
import tracksheet.surface


BlockView = tracksheet.block_view.BlockView
BlockViewKind = tracksheet.block_view.BlockViewKind
Direction = tracksheet.block_view.Direction
EditorConfig = tracksheet.config.EditorConfig
GroupView = tracksheet.group_view.GroupView
KeyClass = tracksheet.entry.KeyClass
ModuleDocument = tracksheet.document.ModuleDocument
Session = tracksheet.block_view.Session
TextSurface = tracksheet.surface.TextSurface
