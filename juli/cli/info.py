"""Inspect command for Juli CLI - static summary of a compiled program."""

import json
from typing import Any, Dict, List

import click

from juli.runtime.errors import ProgramLoadError
from juli.runtime.instructions import Instruction, load_program


def summarize_program(program: List[Any]) -> Dict[str, Any]:
    """
    Summarize a program without running it.

    Warnings mirror what the executor would report, plus instructions that
    follow the first jexit and therefore never run.
    """
    type_counts: Dict[str, int] = {}
    modules: List[str] = []
    warnings: List[str] = []
    first_exit = None

    for index, raw in enumerate(program):
        try:
            instr = Instruction.from_wire(raw)
        except ValueError:
            warnings.append(f"Instruction {index}: malformed")
            continue

        type_counts[instr.type] = type_counts.get(instr.type, 0) + 1

        if instr.is_call:
            module_name, fn_name = instr.reference()
            if instr.name is None:
                warnings.append(f"Instruction {index}: call has no name")
            elif module_name is None or fn_name is None:
                warnings.append(f"Instruction {index}: malformed reference {instr.name!r}")
            elif module_name not in modules:
                modules.append(module_name)
        elif instr.is_exit:
            if first_exit is None:
                first_exit = index
        else:
            warnings.append(f"Instruction {index}: unknown type {instr.type!r}")

    if first_exit is not None and first_exit < len(program) - 1:
        unreachable = len(program) - first_exit - 1
        warnings.append(f"{unreachable} instruction(s) after jexit at {first_exit} never run")

    return {
        "instruction_count": len(program),
        "instruction_types": type_counts,
        "modules": modules,
        "exits_at": first_exit,
        "warnings": warnings,
    }


@click.command()
@click.argument('program', type=click.Path(exists=True, dir_okay=False))
@click.option('--json-output', '--json', '-j', 'json_output', is_flag=True, help='Output as JSON')
def inspect_command(program, json_output):
    """Show a summary of a compiled program."""
    try:
        instructions = load_program(program)
    except ProgramLoadError as e:
        raise click.ClickException(str(e))

    output = summarize_program(instructions)

    if json_output:
        print(json.dumps(output, indent=2))
        return

    print(f"Program: {program}")
    print(f"  Instructions: {output['instruction_count']}")
    print(f"  Types: {output['instruction_types']}")
    print(f"  Modules: {', '.join(output['modules']) or '-'}")
    if output["exits_at"] is not None:
        print(f"  Exits at: {output['exits_at']}")
    for warning in output["warnings"]:
        print(f"  ! {warning}")
