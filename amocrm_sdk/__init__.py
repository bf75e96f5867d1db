"""Client library for the amoCRM REST API: sources, tags, tasks, unsorted requests and users."""

__version__ = "0.1.0"

__all__ = ["sources", "tags", "tasks", "transport", "unsorted", "unsorted_models", "users"]