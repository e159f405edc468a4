"""Social-force simulator for synthetic moving obstacles."""
__version__ = "0.1.0"
