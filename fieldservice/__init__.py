"""
Field service back office

Modules:
- maintenance: Recurring maintenance schedules, status and visit logs
- numbering: Sequential document numbers
- common: Shared settings, models, logging and SQLite storage
"""

__version__ = "0.1.0"
