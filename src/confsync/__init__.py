"""confsync - keep a user-edited YAML config in step with its default template."""

__version__ = "0.1.0"
