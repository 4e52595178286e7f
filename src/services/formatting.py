"""Display formatting for task fields."""
import re
from datetime import datetime

_STATUS_LABELS = {
    "TODO": "To Do",
    "IN_PROGRESS": "In Progress",
    "DONE": "Done",
}

# C0/C1 control characters except tab and newline; ESC among them would let
# task text drive the terminal.
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b-\x1f\x7f-\x9f]")


def format_status(status: str) -> str:
    """Human label for a status value; unrecognized values pass through unchanged."""
    return _STATUS_LABELS.get(str(status), str(status))


def format_datetime(value: datetime) -> str:
    """
    Localized date plus hour:minute, without seconds.

    Aware timestamps are converted to the local timezone; naive timestamps are
    already local.
    """
    local = value.astimezone() if value.tzinfo is not None else value
    return f"{local.strftime('%x')} {local.strftime('%H:%M')}"


def escape_terminal(text: str) -> str:
    """Neutralize control characters so task text prints as inert text."""
    return _CONTROL_CHARS.sub(lambda m: f"\\x{ord(m.group()):02x}", text)
