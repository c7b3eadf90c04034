"""
NoteAlarm: repeating task reminders.

Subpackages:
- tasks: task model, ordered store, alarm scheduler, timers, persistence
- alarms: alarm effects (tones, desktop notification, console alert)
- connectors: console front-end and the background alarm loop
- cli: entrypoint, composition root, slash commands
"""

__version__ = "0.1.0"
