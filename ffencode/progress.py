"""Progress extraction from ffmpeg diagnostic output."""

import math
import re
from dataclasses import dataclass
from typing import List, Optional, Pattern

# Pattern for the input header (e.g., Duration: 00:05:23.45, start: 0.000000)
DURATION_PATTERN = re.compile(r"(\d+):(\d+):(\d+)\.(\d+), start:")
# Pattern for the status line (e.g., time=00:01:23.45 bitrate= 812.3kbits/s)
TIME_PATTERN = re.compile(r"time=(\d+):(\d+):(\d+)\.(\d+) bitrate=")

_LINE_BREAK = re.compile(rb"\r\n|\r|\n")


def to_milliseconds(h: int, m: int, s: int) -> int:
    return (h * 3600 + m * 60 + s) * 1000


def parse_timestamp(pattern: Pattern, line: str) -> int:
    """
    Return the timestamp matched by ``pattern`` in milliseconds, or 0.

    The fractional seconds group is captured but not counted.
    """
    match = pattern.search(line)
    if not match:
        return 0
    return to_milliseconds(int(match.group(1)), int(match.group(2)), int(match.group(3)))


@dataclass
class ProgressState:
    total_duration_ms: int = 0
    elapsed_ms: int = 0
    percentage: Optional[int] = None


class ProgressParser:
    """
    Recover encoding progress from ffmpeg stderr lines.

    The parser looks for the duration header until one is found, then keeps
    tracking the ``time=`` marker of each status line. Percentages are not
    clamped and may exceed 100 when the header underestimates the length.
    """

    def __init__(self):
        self.state = ProgressState()

    def consume(self, line: str) -> Optional[int]:
        """Feed one line, returning the percentage complete if the line reports progress."""
        state = self.state

        if state.total_duration_ms == 0:
            state.total_duration_ms = parse_timestamp(DURATION_PATTERN, line)

        elapsed_ms = parse_timestamp(TIME_PATTERN, line)
        if elapsed_ms == 0:
            return None
        state.elapsed_ms = elapsed_ms

        if state.total_duration_ms > 0:
            state.percentage = math.ceil(state.elapsed_ms / state.total_duration_ms * 100)
            return state.percentage
        return None


class LineSplitter:
    """Reassemble lines from arbitrarily chunked process output."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding
        self._pending = b""

    def _decode(self, raw: bytes) -> str:
        return raw.decode(self.encoding, errors="replace")

    def feed(self, chunk: bytes) -> List[str]:
        # ffmpeg redraws its status line with a bare carriage return
        parts = _LINE_BREAK.split(self._pending + chunk)
        self._pending = parts.pop()
        # A \r\n split across chunks only yields an empty line, which is dropped
        return [self._decode(p) for p in parts if p]

    def flush(self) -> List[str]:
        pending, self._pending = self._pending, b""
        return [self._decode(pending)] if pending else []
