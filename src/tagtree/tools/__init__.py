"""Developer tools for tagtree."""

from .profiling import ParseProfiler, ProfilingSession

__all__ = [
    "ParseProfiler",
    "ProfilingSession",
]
