"""JSON output for the version 1 schema."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import TextIO

from outlook_md.calendar.models import CalendarEvent, CLIOutput, TimeWindow

SUPPORTED_FORMATS = ("json",)


def build_output(
    timezone: str, window: TimeWindow, events: Sequence[CalendarEvent] | None
) -> CLIOutput:
    """Assemble the output document. `events` is always a list."""
    return CLIOutput(timezone=timezone, window=window, events=list(events or []))


def dumps_output(output: CLIOutput) -> str:
    """Serialize with 2-space indentation."""
    return json.dumps(output.to_dict(), indent=2, ensure_ascii=False)


def format_json(output: CLIOutput, stream: TextIO) -> None:
    """Write the document followed by a newline."""
    stream.write(dumps_output(output))
    stream.write("\n")


def loads_output(text: str) -> CLIOutput:
    """Parse a document produced by dumps_output()."""
    return CLIOutput.from_dict(json.loads(text))
