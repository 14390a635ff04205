"""
Juli Modules

A module is a named bag of zero-argument native functions plus one attached
script fragment. Modules are built by host code and exported into a
ModuleRegistry as immutable snapshots.

Key classes:
- Module: Mutable builder-side module
- ExportedModule: Snapshot stored in the registry (copy-on-export)
"""

from __future__ import annotations

import logging
import re
import sys
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, TextIO

logger = logging.getLogger(__name__)

NativeFn = Callable[[], None]

# First "println(" up to the nearest ")", single line only.
_PRINTLN_PATTERN = re.compile(r"println\((.*?)\)")
_QUOTE_CHARS = str.maketrans("", "", "\"'")


def extract_println_argument(text: str) -> Optional[str]:
    """
    Find a ``println(<content>)`` shape in ``text`` and return its content
    with single and double quote characters removed.

    Returns None when the shape is absent or the content is empty. This is a
    text match, not a parser: nested parentheses, escapes and expressions are
    not understood.
    """
    if "println(" not in text:
        return None
    match = _PRINTLN_PATTERN.search(text)
    if not match or not match.group(1):
        return None
    return match.group(1).translate(_QUOTE_CHARS)


def _invoke(functions: Mapping[str, NativeFn], name: str, owner: Optional[str]) -> bool:
    fn = functions.get(name)
    if fn is None:
        if owner:
            logger.warning(f"[juli] Unknown function: {name} (module {owner})")
        else:
            logger.warning(f"[juli] Unknown function: {name}")
        return False
    fn()
    return True


@dataclass(frozen=True)
class ExportedModule:
    """
    Immutable snapshot of a Module, as stored in a ModuleRegistry.

    The function table is copied at export time, so functions defined on the
    source Module afterwards are not visible here. The callables are shared.
    """
    functions: Mapping[str, NativeFn] = field(default_factory=lambda: MappingProxyType({}))
    script: str = ""
    name: Optional[str] = None

    def has_function(self, name: str) -> bool:
        return name in self.functions

    def invoke(self, name: str) -> bool:
        """Run ``name``; returns False with a diagnostic if it is unknown."""
        return _invoke(self.functions, name, self.name)

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "functions": sorted(self.functions),
            "script": self.script,
        }


@dataclass
class Module:
    """
    Builder-side module used to define native functions and attach a script.

    Function names are unique; defining a name twice keeps the last function.
    """
    name: Optional[str] = None
    functions: Dict[str, NativeFn] = field(default_factory=dict)
    script: str = ""
    echo_native_code: bool = True
    stream: Optional[TextIO] = field(default=None, repr=False, compare=False)

    def define_function(self, name: str, fn: NativeFn) -> None:
        """Register ``fn`` under ``name``, replacing any previous definition."""
        self.functions[name] = fn

    def function(self, name: str) -> Callable[[NativeFn], NativeFn]:
        """Decorator form of define_function."""
        def decorator(fn: NativeFn) -> NativeFn:
            self.define_function(name, fn)
            return fn
        return decorator

    def attach_native_code(self, code: str, stream: Optional[TextIO] = None) -> Optional[str]:
        """
        Cosmetic hook for injected source: echoes the argument of a
        ``println(...)`` shape to ``stream`` (the module stream, else stdout)
        and returns it. Anything else is a silent no-op.
        """
        content = extract_println_argument(code)
        if content is not None and self.echo_native_code:
            print(content, file=stream or self.stream or sys.stdout)
        return content

    def invoke(self, name: str) -> bool:
        """
        Run the function registered under ``name`` with no arguments.

        Returns True if it ran. A missing function emits one "unknown
        function" diagnostic and returns False instead of raising.
        """
        return _invoke(self.functions, name, self.name)

    def snapshot(self) -> ExportedModule:
        """Export this module's script and a copy of its function table."""
        return ExportedModule(
            functions=MappingProxyType(dict(self.functions)),
            script=self.script,
            name=self.name,
        )
