"""IdeaBoard: an infinite idea canvas with a todo-list view."""

__version__ = '0.3.0'
