"""nlsh · natural language to shell commands."""
__version__ = "1.0.0"
