"""Game-loop helpers built on the core engines."""
