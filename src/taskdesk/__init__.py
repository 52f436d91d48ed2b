"""taskdesk: a local task list with search, filters and statistics."""

__version__ = "0.1.0"
