"""
Juli Program Executor

Runs a compiled Julk JSON program against a ModuleRegistry.

Execution is strictly sequential: one instruction at a time, in array order.
A ``call`` resolves ``module.function`` through the registry and invokes it, a
``jexit`` ends the program (and, uncaught, the process), and anything else is
reported and skipped. Malformed input never aborts the run.

Key classes:
- ExecutionConfig: Configuration for execution
- ExecutionResult: Outcome and diagnostics of a run
- Executor: Main execution engine
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, TextIO

from juli.runtime.errors import ProgramExit
from juli.runtime.instructions import Instruction
from juli.runtime.registry import ModuleRegistry

logger = logging.getLogger(__name__)


class ExecutorState(Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    EXITED = "exited"


@dataclass
class ExecutionConfig:
    """Configuration for program execution."""
    report_unknown_modules: bool = False
    exit_notice: bool = True


@dataclass
class ExecutionResult:
    """Result of running a program."""
    state: ExecutorState = ExecutorState.RUNNING
    executed: int = 0
    calls: int = 0
    diagnostics: List[str] = field(default_factory=list)
    exit_code: Optional[int] = None

    @property
    def exited(self) -> bool:
        return self.state == ExecutorState.EXITED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "executed": self.executed,
            "calls": self.calls,
            "diagnostics": self.diagnostics,
            "exit_code": self.exit_code,
        }


class Executor:
    """
    Main Julk JSON execution engine.

    State machine: RUNNING until the program ends (COMPLETED) or a ``jexit``
    is reached (EXITED, raised as ProgramExit).
    """

    def __init__(self,
                 registry: ModuleRegistry,
                 config: ExecutionConfig = None,
                 stream: Optional[TextIO] = None):
        self.registry = registry
        self.config = config or ExecutionConfig()
        self.stream = stream

    def run(self, program: Iterable[Any]) -> ExecutionResult:
        """
        Execute a program.

        Args:
            program: Sequence of instructions (decoded JSON objects or
                Instruction models)

        Returns:
            ExecutionResult once the program runs to its end

        Raises:
            ProgramExit: when a ``jexit`` instruction is executed
        """
        result = ExecutionResult()

        for index, raw in enumerate(program):
            result.executed += 1

            try:
                instr = Instruction.from_wire(raw)
            except ValueError as e:
                self._diagnose(result, f"Malformed instruction at {index}: {e}")
                continue

            if instr.is_call:
                self._call(instr, index, result)
            elif instr.is_exit:
                self._exit(instr, result)
            else:
                self._diagnose(result, f"Unknown instruction: {instr.type}")

        result.state = ExecutorState.COMPLETED
        return result

    def _call(self, instr: Instruction, index: int, result: ExecutionResult) -> None:
        if instr.name is None:
            self._diagnose(result, f"Call at {index} has no name")
            return
        if not isinstance(instr.name, str):
            self._diagnose(result, f"Malformed call reference: {instr.name!r}")
            return

        module_name, fn_name = instr.reference()
        if fn_name is None:
            self._diagnose(result, f"Malformed call reference: {instr.name!r}")
            return

        module = self.registry.lookup(module_name)
        if module is None:
            if self.config.report_unknown_modules:
                self._diagnose(result, f"Unknown module: {module_name}")
            else:
                logger.debug(f"[juli] Skipping call to unknown module {module_name!r}")
            return

        # invoke() logs its own diagnostic for a missing function
        if module.invoke(fn_name):
            result.calls += 1
        else:
            result.diagnostics.append(f"Unknown function: {fn_name}")

    def _exit(self, instr: Instruction, result: ExecutionResult) -> None:
        code = instr.exit_code
        result.state = ExecutorState.EXITED
        result.exit_code = code
        if self.config.exit_notice:
            print(f"[juli] Exiting with code {code}", file=self.stream or sys.stdout)
        raise ProgramExit(code, result)

    def _diagnose(self, result: ExecutionResult, message: str) -> None:
        logger.warning(f"[juli] {message}")
        result.diagnostics.append(message)
