"""Parse profiling for tagtree.

Times repeated parses of one document and tracks resident memory of the
current process with :mod:`psutil`.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import psutil

from tagtree.api import XMLParser
from tagtree.character import TextBuffer
from tagtree.shared import ParserConfig, PerformanceMetrics, get_logger


@dataclass
class ProfilingSession:
    """Timings and memory readings for one profiled document."""

    session_id: str
    start_time: float
    end_time: float
    input_size: int  # bytes
    memory_start: int = 0  # bytes
    memory_end: int = 0  # bytes
    runs: List[PerformanceMetrics] = field(default_factory=list)

    @property
    def total_duration_ms(self) -> float:
        """Total session duration in milliseconds."""
        return (self.end_time - self.start_time) * 1000

    @property
    def average_duration_ms(self) -> float:
        if not self.runs:
            return 0.0
        return sum(run.processing_time_ms for run in self.runs) / len(self.runs)

    @property
    def memory_delta(self) -> int:
        """Memory usage change in bytes."""
        return self.memory_end - self.memory_start

    @property
    def throughput_mb_per_s(self) -> float:
        """Processing throughput in MB/s."""
        duration_s = self.end_time - self.start_time
        if duration_s <= 0:
            return 0.0
        return (self.input_size * len(self.runs) / (1024 * 1024)) / duration_s

    def to_dict(self) -> Dict[str, Any]:
        last = self.runs[-1] if self.runs else PerformanceMetrics()
        return {
            "session_id": self.session_id,
            "input_size": self.input_size,
            "runs": len(self.runs),
            "total_duration_ms": round(self.total_duration_ms, 3),
            "average_duration_ms": round(self.average_duration_ms, 3),
            "throughput_mb_per_s": round(self.throughput_mb_per_s, 3),
            "memory_delta_bytes": self.memory_delta,
            "tokens": last.tokens_generated,
            "elements": last.elements_created,
        }


class ParseProfiler:
    """Runs a parser repeatedly over one document and records each run.

    Examples:
        >>> profiler = ParseProfiler()
        >>> session = profiler.profile('<a><b/></a>', repeat=3)
        >>> len(session.runs)
        3
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        enable_memory_tracking: bool = True
    ) -> None:
        self.parser = XMLParser(config)
        self.enable_memory_tracking = enable_memory_tracking
        self.sessions: List[ProfilingSession] = []
        self.logger = get_logger(__name__, None, "parse_profiler")
        self._process = psutil.Process()

    def _memory(self) -> int:
        if not self.enable_memory_tracking:
            return 0
        return self._process.memory_info().rss

    def profile(
        self,
        source: Union[str, bytes, Path],
        repeat: int = 1,
        session_id: Optional[str] = None
    ) -> ProfilingSession:
        """Parse ``source`` ``repeat`` times.

        ``str`` is XML text and a :class:`~pathlib.Path` is read once up
        front, so file I/O is not part of the timings.

        Raises:
            ValueError: if ``repeat`` is less than 1
            TagTreeError: if the document does not parse
        """
        if repeat < 1:
            raise ValueError("repeat must be >= 1")
        if isinstance(source, Path):
            session_id = session_id or str(source)
            data = TextBuffer.load(source).getvalue()
        elif isinstance(source, str):
            data = source.encode("utf-8")
        else:
            data = bytes(source)
        session_id = session_id or f"session-{len(self.sessions) + 1}"

        session = ProfilingSession(
            session_id=session_id,
            start_time=time.time(),
            end_time=0.0,
            input_size=len(data),
            memory_start=self._memory(),
        )
        for _ in range(repeat):
            self.parser.parse(data)
            session.runs.append(self.parser.last_metrics)
        session.end_time = time.time()
        session.memory_end = self._memory()

        self.sessions.append(session)
        self.logger.info(
            "Profiled document",
            extra={
                "session_id": session_id,
                "runs": repeat,
                "duration_ms": session.total_duration_ms,
                "throughput_mb_s": session.throughput_mb_per_s,
            },
        )
        return session

    def report(self) -> Dict[str, Any]:
        """Summary of every session profiled so far."""
        durations = [session.average_duration_ms for session in self.sessions]
        return {
            "session_count": len(self.sessions),
            "average_duration_ms": (
                sum(durations) / len(durations) if durations else 0.0
            ),
            "sessions": [session.to_dict() for session in self.sessions],
        }
