"""Travel, quest and narrative-effect engine for a narrative RPG."""

__version__ = "0.1.0"
