"""Event string construction following Splunk key=value conventions."""
from typing import Iterable, List, Mapping, Optional, Tuple

from shared.utils import event_timestamp


def _pair(delimiter: str, name: str, value: str) -> str:
    # TODO: escape double quotes inside field values
    return f'{delimiter}{name}="{value}"'


def format_event(delimiter: str, timestamp: str, fields: Mapping[str, str]) -> str:
    """Render ``timestamp|a="1"|b="2"`` from an ordered mapping of fields.

    Embedded double quotes in values are written as-is.
    """
    return timestamp + "".join(_pair(delimiter, name, value) for name, value in fields.items())


def join_events(events: Iterable[str]) -> str:
    """Join events into one request body, each terminated by a newline."""
    return "".join(event + "\n" for event in events)


class EventBuilder:
    """Build a single event string, stamped when the builder is created.

    With a delimiter of ``|`` events look like::

        2024-03-01T14:02:11.042-0500|fieldA="aaaaa123"|fieldB="bbbbb456"
    """

    def __init__(self, delim: str = "|", timestamp: Optional[str] = None):
        self.delim = delim
        self.timestamp = timestamp or event_timestamp()
        self._pairs: List[Tuple[str, str]] = []

    def add(self, field_name: str, field_value: str) -> "EventBuilder":
        """Append one field=value pair."""
        self._pairs.append((field_name, field_value))
        return self

    def add_fields(self, fields: Mapping[str, str]) -> "EventBuilder":
        """Append every pair of ``fields`` in iteration order."""
        for name, value in fields.items():
            self.add(name, value)
        return self

    def build(self) -> str:
        return self.timestamp + "".join(_pair(self.delim, name, value) for name, value in self._pairs)
