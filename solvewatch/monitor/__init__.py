"""solvewatch monitor: session wiring and terminal rendering.

Modules
-------
session
    ``MonitorSession`` wires watcher, heatmap and broadcaster together.
projection
    ``MonitorView``: a frozen, point-in-time view for renderers.
renderer
    ``MonitorRenderer`` turns ``MonitorView`` into Rich renderables,
    including continuous ``Rich.Live`` mode.
"""
