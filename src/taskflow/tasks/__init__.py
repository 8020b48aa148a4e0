"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskDraft, TaskStatus, TaskPriority, FilterCriteria)
- task_api.py: record <-> Task mapping over the remote table API
- task_form.py: shared create/edit form + validation
- task_store.py: in-memory collection with pessimistic remote mutations
"""
