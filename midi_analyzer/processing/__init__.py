"""Processing layer - Event-level views.

This layer narrows decoded events before analysis or output:
- Tick range filtering
- Event type, channel and meta type filtering
- Positional value filtering
- Track list filtering (channel, program)
"""

from .filters import EventFilter, TimeRange, ValueFilter

__all__ = [
    "EventFilter",
    "TimeRange",
    "ValueFilter",
]
