"""Optional 3D visualizer for card layouts.

This subpackage is only used by the `cardstage view` command and by
`scripts/plot_layouts.py`.

It intentionally imports heavy GUI deps (tkinter/matplotlib/numpy) only when
invoked, so the rest of the CLI stays lightweight.
"""
