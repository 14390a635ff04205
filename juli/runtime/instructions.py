"""
Julk JSON Instruction Model

Wire format of a compiled program: a JSON array of objects, each with a string
``type``. Only ``call`` and ``jexit`` have meaning to the engine; any other
type is carried through and reported when executed.

Key items:
- InstructionType: The recognised discriminators
- Instruction: One instruction (pydantic model, extra keys preserved)
- split_reference: Dotted ``module.function`` splitting policy
- load_program / parse_program: Program loading from JSON
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from juli.runtime.errors import ProgramLoadError


class InstructionType(str, Enum):
    CALL = "call"
    JEXIT = "jexit"


class Instruction(BaseModel):
    """
    A single compiled instruction.

    ``args`` is accepted and preserved for forward compatibility but is never
    passed to native functions. ``code`` is only meaningful for ``jexit``.
    """
    model_config = ConfigDict(extra="allow")

    type: str
    name: Optional[Any] = None
    args: Optional[Any] = None
    code: Optional[Any] = None

    @classmethod
    def from_wire(cls, raw: Any) -> "Instruction":
        """
        Build an Instruction from a decoded JSON value.

        Raises ValueError with a one-line reason when ``raw`` is not an
        instruction object.
        """
        if isinstance(raw, Instruction):
            return raw
        if not isinstance(raw, Mapping):
            raise ValueError(f"expected an instruction object, got {type(raw).__name__}")
        try:
            return cls.model_validate(dict(raw))
        except ValidationError as e:
            raise ValueError(summarize_validation_error(e)) from e

    @property
    def is_call(self) -> bool:
        return self.type == InstructionType.CALL.value

    @property
    def is_exit(self) -> bool:
        return self.type == InstructionType.JEXIT.value

    @property
    def exit_code(self) -> int:
        """Exit status for ``jexit``: ``code`` if it is an integer, else 0."""
        if isinstance(self.code, int) and not isinstance(self.code, bool):
            return self.code
        return 0

    def reference(self) -> Tuple[Optional[str], Optional[str]]:
        """
        (module, function) for a ``call``; (None, None) when ``name`` is
        missing or not a string.
        """
        if not isinstance(self.name, str):
            return None, None
        return split_reference(self.name)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


def summarize_validation_error(error: ValidationError) -> str:
    """First pydantic error as ``field: message``."""
    details = error.errors()
    if not details:
        return "invalid instruction"
    first = details[0]
    loc = ".".join(str(part) for part in first.get("loc", ())) or "instruction"
    summary = f"{loc}: {first.get('msg', 'invalid')}"
    if len(details) > 1:
        summary += f" (+{len(details) - 1} more)"
    return summary


def split_reference(name: str) -> Tuple[str, Optional[str]]:
    """
    Split a dotted ``module.function`` reference.

    - ``"M.f"``   -> ("M", "f")
    - ``"f"``     -> ("f", None), no function part
    - ``"M.f.g"`` -> ("M", "f"), segments after the second dot are ignored
    - ``".f"``    -> ("", "f") and ``"M."`` -> ("M", "")
    """
    parts = name.split(".")
    if len(parts) < 2:
        return name, None
    return parts[0], parts[1]


def parse_program(data: Any, source: Optional[str] = None) -> List[Any]:
    """
    Check that decoded JSON is a program (an array).

    Individual items are returned untouched; the executor validates each one
    when it reaches it, so a bad item never prevents the others from running.
    """
    if not isinstance(data, list):
        raise ProgramLoadError(
            f"program must be a JSON array of instructions, got {type(data).__name__}",
            source=source,
        )
    return data


def load_program(path: Union[str, Path]) -> List[Any]:
    """Load a compiled program from a JSON file."""
    path = Path(path)
    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ProgramLoadError(f"invalid JSON - {e}", source=str(path)) from e
    except OSError as e:
        raise ProgramLoadError(str(e), source=str(path)) from e
    return parse_program(data, source=str(path))
