"""
Juli Runtime Errors

Per the error model, most runtime faults are non-fatal diagnostics and never
raise. The types here cover the few cases that do leave the engine:

- JuliError: Base class for runtime errors
- ProgramLoadError: A program file is not a JSON array of instructions
- PluginError: A native plugin cannot be imported or registered
- ProgramExit: Raised by ``jexit``; terminates the host process when uncaught
"""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from juli.runtime.executor import ExecutionResult


class JuliError(Exception):
    """Base class for Juli runtime errors."""


class ProgramLoadError(JuliError):
    """Raised when a compiled program cannot be loaded."""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.source = source

    def __str__(self) -> str:
        if self.source:
            return f"{self.source}: {self.message}"
        return self.message


class PluginError(JuliError):
    """Raised when a native plugin cannot be loaded."""

    def __init__(self, plugin: str, message: str):
        super().__init__(f"Plugin {plugin!r}: {message}")
        self.plugin = plugin
        self.message = message


class ProgramExit(SystemExit):
    """
    Terminal transition of the engine, raised by a ``jexit`` instruction.

    Subclasses SystemExit so an uncaught ``jexit`` ends the process with
    ``code`` as its status. Embedders may catch it; ``result`` holds the
    execution state up to and including the exit.
    """

    def __init__(self, code: int = 0, result: Optional["ExecutionResult"] = None):
        super().__init__(code)
        self.result = result
