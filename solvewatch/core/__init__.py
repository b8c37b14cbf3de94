"""Core pipeline: parse, read, watch, and derive the stability heatmap."""
