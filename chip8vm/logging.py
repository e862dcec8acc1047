"""Console logging utilities for running the interpreter.

Provides a small levelled console logger, a trace logger that prints one
line per executed instruction, and a tqdm progress bar for long headless
runs.
"""

import time
import sys
from typing import Callable, Optional, Tuple, TextIO

from tqdm import tqdm

from chip8vm.decode import Operation, format_operation


# Level name -> (rank, ANSI color).
LEVELS = {
    "DEBUG": (0, "\033[36m"),
    "INFO": (1, "\033[32m"),
    "WARNING": (2, "\033[33m"),
    "ERROR": (3, "\033[31m"),
}
RESET = "\033[0m"


class ConsoleLogger:
    """Levelled console logger writing to a text stream.

    Colors are only emitted when the stream is a terminal.
    """

    def __init__(
        self,
        name: str = "chip8vm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream: Optional[TextIO] = None,
    ):
        log_level = log_level.upper()
        if log_level not in LEVELS:
            raise ValueError(f"Unknown log level {log_level!r}, expected one of {list(LEVELS)}")
        self.name = name
        self.threshold = LEVELS[log_level][0]
        self.stream = stream if stream is not None else sys.stdout
        self.use_colors = use_colors and getattr(self.stream, "isatty", lambda: False)()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def _format_message(self, level: str, message: str) -> str:
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        if self.use_colors:
            level_str = f"{LEVELS[level][1]}{level_str}{RESET}"
        return f"{timestamp}{level_str}[{self.name}] {message}"

    def log(self, level: str, message: str):
        """Log a message at one of DEBUG, INFO, WARNING or ERROR."""
        level = level.upper()
        if LEVELS[level][0] >= self.threshold:
            print(self._format_message(level, message), file=self.stream, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)


class TraceLogger(ConsoleLogger):
    """Logger for instruction traces.

    Executed instructions are logged at DEBUG, skipped opcodes at WARNING
    and failures at ERROR, so the default INFO level only shows problems.
    """

    def __init__(self, name: str = "Trace", **kwargs):
        super().__init__(name, **kwargs)
        self.steps = 0

    def log_step(self, pc: int, opcode: int, operation: Operation):
        """Log one executed instruction at its fetch address."""
        self.steps += 1
        self.debug(f"{pc:04X}: {opcode:04X}  {format_operation(operation)}")

    def log_skip(self, pc: int, error: Exception):
        self.warning(f"{pc:04X}: skipped - {error}")

    def log_fault(self, pc: int, error: Exception):
        self.error(
            f"{pc:04X}: {type(error).__name__}: {error} (after {self.steps} instructions)"
        )


def build_progress_bar(
    n: int,
    enabled: bool = True,
    desc: Optional[str] = None,
    **kwargs,
) -> Tuple[Callable[[int], None], Callable[[], None]]:
    """Build an (update, close) pair driving a tqdm bar over ``n`` cycles.

    With ``enabled`` false both callables do nothing.
    """
    if not enabled:
        return (lambda steps: None), (lambda: None)

    if desc is None:
        desc = f"Running ({n:,} cycles)"

    for kwarg in ("total", "unit"):
        kwargs.pop(kwarg, None)

    bar = tqdm(total=n, desc=desc, unit="cycle", **kwargs)

    def update(steps: int):
        bar.update(steps)

    def close():
        bar.close()

    return update, close
