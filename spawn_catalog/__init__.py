"""spawn_catalog: validated catalog of every spawnable item."""

__version__ = "0.1.0"
