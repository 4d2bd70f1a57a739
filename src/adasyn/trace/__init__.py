"""Trace sinks for the production trace."""

from adasyn.trace.sink import EventKind, NullTrace, PrintTrace, RecordingTrace, TraceEvent, TraceSink

__all__ = ["TraceSink", "NullTrace", "PrintTrace", "RecordingTrace", "TraceEvent", "EventKind"]
