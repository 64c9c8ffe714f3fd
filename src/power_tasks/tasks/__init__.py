"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, TaskStatus)
- task_codec.py: hand-written JSON encoder/decoder for task lists
- task_file.py: best-effort save/load of a task list to a file
- task_store.py: in-memory list with CRUD, search and sorting
"""
