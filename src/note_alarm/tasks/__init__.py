"""
Task subsystem.

Components:
- task_models.py: Task record, interval coercion, persisted record shape
- task_store.py: ordered in-memory list with change notifications
- alarm_scheduler.py: one repeating timer per task, reconciled on every change
- timers.py: asyncio-backed repeating timers
- task_persistence.py: JSON blob store + task list load/save
"""
