from __future__ import annotations
import logging, time
from typing import Any, Dict, Optional
from rich.logging import RichHandler
from rich.console import Console

_LOGGER = logging.getLogger("recordqa")
_HANDLER = RichHandler(rich_tracebacks=True, markup=True)
_FORMAT = "%(message)s"
_CONSOLE = Console()

def set_verbosity(verbose: bool) -> None:
    """Setup logging with the Rich handler."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format=_FORMAT, datefmt="[%X]", handlers=[_HANDLER])
    _LOGGER.setLevel(level)

def log() -> logging.Logger:
    """Get the package logger."""
    return _LOGGER

def console() -> Console:
    """Get the Rich console for styled output."""
    return _CONSOLE

class ProgressTracker:
    """Track records streamed through one input file."""

    def __init__(self, name: str = "operation"):
        self.name = name
        self.processed = 0
        self.batches = 0
        self.start_time = time.time()

    def update(self, count: int) -> None:
        self.processed += count
        self.batches += 1

    def get_stats(self) -> Dict[str, Any]:
        elapsed = time.time() - self.start_time
        return {
            "processed": self.processed,
            "batches": self.batches,
            "elapsed": elapsed,
            "rate": self.processed / elapsed if elapsed > 0 else 0,
        }

    def log_progress(self, logger: Optional[logging.Logger] = None) -> None:
        stats = self.get_stats()
        logger = logger or log()
        logger.info(f"{self.name}: {self.processed:,} records in {self.batches} batch(es) - "
                    f"{stats['elapsed']:.1f}s ({stats['rate']:.0f}/s)")
