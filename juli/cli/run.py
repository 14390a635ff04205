"""Run command for Juli CLI."""

import json
import os
import sys

import click

from juli.runtime.context import RuntimeContext
from juli.runtime.errors import PluginError, ProgramExit, ProgramLoadError
from juli.runtime.executor import ExecutionConfig
from juli.runtime.instructions import load_program


@click.command()
@click.argument('program', type=click.Path(exists=True, dir_okay=False))
@click.option('--plugin', '-p', 'plugins', multiple=True,
              help='Dotted path of a module with register(context); repeatable')
@click.option('--report-unknown-modules', is_flag=True,
              help='Report calls to modules that are not exported')
@click.option('--json-output', '--json', '-j', 'json_output', is_flag=True,
              help='Print the execution result as JSON')
def run_command(program, plugins, report_unknown_modules, json_output):
    """Execute a compiled Julk JSON program.

    The exit status is the code of the program's jexit instruction, or 0
    when the program runs to its end.
    """
    try:
        instructions = load_program(program)
    except ProgramLoadError as e:
        raise click.ClickException(str(e))

    # JSON mode keeps stdout machine-readable
    config = ExecutionConfig(
        report_unknown_modules=report_unknown_modules,
        exit_notice=not json_output,
    )
    ctx = RuntimeContext(config=config, stream=sys.stderr if json_output else None)

    # Plugins resolve from the working directory, as with python -m
    cwd = os.getcwd()
    if plugins and cwd not in sys.path:
        sys.path.insert(0, cwd)

    for plugin in plugins:
        try:
            ctx.load_plugin(plugin)
        except PluginError as e:
            raise click.ClickException(str(e))

    try:
        result = ctx.run(instructions)
    except ProgramExit as e:
        if json_output and e.result is not None:
            print(json.dumps(e.result.to_dict(), indent=2))
        raise

    if json_output:
        print(json.dumps(result.to_dict(), indent=2))
