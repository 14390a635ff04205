"""
Juli Runtime Context

Holds what used to be process-wide runtime state: the module registry and the
"current module" that builder calls operate on. Independent contexts do not
share anything, so several runtimes can coexist in one process.

Builder API, in the order a host normally uses it:

    ctx = RuntimeContext()
    greeter = Module("greeter")
    ctx.init(greeter, lambda: greeter.define_function("hello", say_hello))
    ctx.jscript(lambda: 'fn hello() { println("hi") }')
    ctx.export(lambda: None, "Greeter")
    ctx.run([{"type": "call", "name": "Greeter.hello"}])
"""

from __future__ import annotations

import importlib
import logging
import sys
from typing import Any, Callable, Iterable, Optional, TextIO

from juli.runtime.errors import PluginError, ProgramExit
from juli.runtime.executor import ExecutionConfig, ExecutionResult, Executor
from juli.runtime.module import ExportedModule, Module
from juli.runtime.registry import ModuleRegistry

logger = logging.getLogger(__name__)


class RuntimeContext:
    """Registry plus current-module pointer, passed explicitly to builders."""

    def __init__(self,
                 registry: ModuleRegistry = None,
                 config: ExecutionConfig = None,
                 stream: Optional[TextIO] = None):
        self.registry = registry or ModuleRegistry()
        self.config = config or ExecutionConfig()
        self.stream = stream
        self.current_module: Optional[Module] = None

    def module(self, mod: Module) -> None:
        """Make ``mod`` the current working module."""
        self._adopt(mod)

    def init(self, mod: Module, fn: Callable[[], None]) -> None:
        """Make ``mod`` current and run its initialization logic."""
        self._adopt(mod)
        fn()

    def _adopt(self, mod: Module) -> None:
        # println text follows the context stream unless the module has its own
        if self.stream is not None and mod.stream is None:
            mod.stream = self.stream
        self.current_module = mod

    def jscript(self, fn: Callable[[], str]) -> None:
        """Attach the (trimmed) source returned by ``fn`` to the current module."""
        if self.current_module is None:
            logger.debug("[juli] jscript called with no current module")
            return
        self.current_module.script = fn().strip()

    def export(self, fn: Callable[[], None], name: str) -> Optional[ExportedModule]:
        """
        Run ``fn``, then export the current module under ``name``.

        Returns the stored snapshot, or None if there is no current module.
        """
        fn()
        if self.current_module is None:
            logger.debug(f"[juli] Nothing to export as {name!r}: no current module")
            return None
        return self.registry.export(name, self.current_module.snapshot())

    def jimport(self, name: str) -> Optional[ExportedModule]:
        """Look up a module exported as ``name``."""
        return self.registry.lookup(name)

    def jcall(self, module_name: str, fn_name: str) -> bool:
        """
        Call ``module_name.fn_name`` directly.

        Silent when either the module or the function is missing; returns
        whether a function ran.
        """
        mod = self.registry.lookup(module_name)
        if mod is None or not mod.has_function(fn_name):
            return False
        mod.functions[fn_name]()
        return True

    def jexit(self, code: int = 0) -> None:
        """Print the exit notice and leave with ``code``."""
        if self.config.exit_notice:
            print(f"[juli] Exiting with code {code}", file=self.stream or sys.stdout)
        raise ProgramExit(code)

    def executor(self) -> Executor:
        return Executor(self.registry, self.config, stream=self.stream)

    def run(self, program: Iterable[Any]) -> ExecutionResult:
        """Run a compiled program against this context's registry."""
        return self.executor().run(program)

    def load_plugin(self, dotted_path: str) -> None:
        """
        Import a plugin module and call its ``register(context)`` hook.

        Plugins are how native functions reach the CLI: ``register`` builds
        Modules and exports them into this context.
        """
        try:
            plugin = importlib.import_module(dotted_path)
        except ImportError as e:
            raise PluginError(dotted_path, f"cannot import ({e})") from e

        register = getattr(plugin, "register", None)
        if not callable(register):
            raise PluginError(dotted_path, "has no register(context) function")

        register(self)
        logger.debug(f"[juli] Loaded plugin {dotted_path!r}")
