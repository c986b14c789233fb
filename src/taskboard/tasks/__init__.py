"""
Task subsystem.

Components:
- task_models.py: data structures (TaskRecord, IdKind, TaskDraft)
- task_store.py: in-memory ordered store with keyed mutation primitives
- reconciler.py: optimistic create/toggle/delete with confirm-or-rollback
- confirmation.py: confirmation gate in front of deletes
"""
