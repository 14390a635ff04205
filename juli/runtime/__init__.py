"""
Juli Runtime Engine

This package provides the core runtime for executing compiled Julk JSON:
- Module: Native function bag with an attached script
- ModuleRegistry: Export name -> module snapshot
- Executor: Sequential instruction engine (call / jexit)
- RuntimeContext: Registry plus builder API, one per runtime
"""

from juli.runtime.errors import JuliError, ProgramLoadError, PluginError, ProgramExit
from juli.runtime.module import Module, ExportedModule, NativeFn, extract_println_argument
from juli.runtime.registry import ModuleRegistry
from juli.runtime.instructions import (
    Instruction,
    InstructionType,
    split_reference,
    parse_program,
    load_program,
)
from juli.runtime.executor import Executor, ExecutionConfig, ExecutionResult, ExecutorState
from juli.runtime.context import RuntimeContext

__all__ = [
    "JuliError",
    "ProgramLoadError",
    "PluginError",
    "ProgramExit",
    "Module",
    "ExportedModule",
    "NativeFn",
    "extract_println_argument",
    "ModuleRegistry",
    "Instruction",
    "InstructionType",
    "split_reference",
    "parse_program",
    "load_program",
    "Executor",
    "ExecutionConfig",
    "ExecutionResult",
    "ExecutorState",
    "RuntimeContext",
]
