"""
Helpdesk Engine

Ticket metrics and notification core with:
- Calendar-bucketed opened/closed series (day, week, month, custom)
- Resolution times overall, per request type and per assignee
- Deduplicated per-user notification feed with persisted read state
"""

__version__ = "0.1.0"
