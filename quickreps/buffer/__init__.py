"""Quick-entry buffer: debounced accumulation of taps into one committed set."""

from quickreps.buffer.history import HistoryCache
from quickreps.buffer.machine import BufferedCounterMachine, BufferSnapshot
from quickreps.buffer.registry import BufferRegistry
from quickreps.buffer.state import BufferMessage, Buffering, Idle, transition

__all__ = [
    "BufferMessage",
    "BufferRegistry",
    "BufferSnapshot",
    "BufferedCounterMachine",
    "Buffering",
    "HistoryCache",
    "Idle",
    "transition",
]
