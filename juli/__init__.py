"""
Juli - Embeddable runtime for compiled Julk JSON programs.

Exports:
- RuntimeContext: Registry and builder API for one runtime
- Module / ExportedModule: Native function bags and their snapshots
- Executor: Instruction engine
"""

from juli.runtime import (
    RuntimeContext,
    Module,
    ExportedModule,
    ModuleRegistry,
    Instruction,
    Executor,
    ExecutionConfig,
    ExecutionResult,
    ProgramExit,
    extract_println_argument,
)

__version__ = "0.1.0"

__all__ = [
    "RuntimeContext",
    "Module",
    "ExportedModule",
    "ModuleRegistry",
    "Instruction",
    "Executor",
    "ExecutionConfig",
    "ExecutionResult",
    "ProgramExit",
    "extract_println_argument",
]
