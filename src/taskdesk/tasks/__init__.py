"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskFilter, TaskStats)
- task_store.py: in-memory owner of the collection + mutators
- task_persistence.py: JSON codec and key-value persistence adapter
- task_query.py: keyword search, named filters, ordering
- task_stats.py: total / completed percentage
- errors.py: TaskNotFound, DeserializationError, PersistenceFailed, UnknownFilter
"""
