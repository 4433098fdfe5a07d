"""Console logging for the emulator core and frontend.

The core reports from inside compiled code through ``jax.debug.callback``,
so everything here is plain host-side Python.
"""

import time
import sys


class ConsoleLogger:
    """Prints ``[elapsed][name] LEVEL message`` lines at or above a threshold."""

    LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40, "CRITICAL": 50}
    COLORS = {"DEBUG": "\033[36m", "WARNING": "\033[33m", "ERROR": "\033[31m", "CRITICAL": "\033[35m"}

    def __init__(
        self,
        name: str = "chipjax",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.use_colors = use_colors
        self.show_timestamps = show_timestamps
        self.start_time = time.time()
        self.set_level(log_level)

    def set_level(self, log_level: str):
        """Change the minimum level that gets printed."""
        level = log_level.upper()
        if level not in self.LEVELS:
            raise ValueError(
                f"Unknown log level '{log_level}'. Available: {list(self.LEVELS)}"
            )
        self.log_level = level

    def enabled_for(self, level: str) -> bool:
        return self.LEVELS[level] >= self.LEVELS[self.log_level]

    def log(self, level: str, message: str):
        if not self.enabled_for(level):
            return
        # Looked up per call so captured or redirected stdout is honoured
        stream = sys.stdout
        tag = f"{level:<8s}"
        if self.use_colors and level in self.COLORS and stream.isatty():
            tag = f"{self.COLORS[level]}{tag}\033[0m"
        stamp = f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        print(f"{stamp}[{self.name}] {tag} {message}", file=stream, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)

    def instruction(self, pc: int, word: int, text: str):
        """Trace line for one executed instruction, at DEBUG."""
        self.debug(f"0x{pc:03X}  {word:04X}  {text}")


logger = ConsoleLogger("chipjax")


def set_log_level(log_level: str):
    """Set the level of the package logger."""
    logger.set_level(log_level)


def report_unknown_opcode(raw, pc):
    """Host callback for opcodes that match no handler."""
    logger.warning(f"Unknown opcode 0x{int(raw):04X} at 0x{int(pc):03X}")
