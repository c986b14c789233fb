"""
taskboard: task-list client with optimistic updates.

Subpackages:
- core/: ports (service/notifier protocols), errors, notices, AppState
- tasks/: task records, in-memory store, reconciliation engine, delete confirmation
- remote/: HTTP and offline implementations of the task service
- cli/, connectors/: composition root, slash commands, console REPL
"""

__version__ = "0.1.0"
