"""Test the runtime context builder API."""
import io
import logging
import pytest
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from juli.runtime.context import RuntimeContext
from juli.runtime.errors import PluginError, ProgramExit
from juli.runtime.executor import ExecutionConfig, ExecutorState
from juli.runtime.module import Module


class TestBuilderAPI:
    """Tests for module / init / jscript / export."""

    def test_module_sets_current(self, context):
        """Test module() selects the current module."""
        m = Module("m")
        context.module(m)
        assert context.current_module is m

    def test_init_runs_fn(self, context, counter):
        """Test init() selects the module and runs the init logic."""
        m = Module("m")
        context.init(m, lambda: m.define_function("f", counter))
        assert context.current_module is m
        assert "f" in m.functions

    def test_module_inherits_context_stream(self, capsys):
        """Test println text goes to the context stream once a module is adopted."""
        stream = io.StringIO()
        ctx = RuntimeContext(stream=stream)
        m = Module("m")
        ctx.init(m, lambda: None)
        m.attach_native_code('println("hi")')
        assert stream.getvalue() == "hi\n"
        assert capsys.readouterr().out == ""

    def test_module_keeps_own_stream(self):
        """Test a module with its own stream is not redirected."""
        own = io.StringIO()
        ctx = RuntimeContext(stream=io.StringIO())
        m = Module("m", stream=own)
        ctx.module(m)
        m.attach_native_code('println("hi")')
        assert own.getvalue() == "hi\n"

    def test_jscript_trims_and_attaches(self, context):
        """Test jscript() attaches trimmed source to the current module."""
        m = Module("m")
        context.module(m)
        context.jscript(lambda: "\n   fn main() {}\n  ")
        assert m.script == "fn main() {}"

    def test_jscript_without_module(self, context):
        """Test jscript() is a no-op with no current module."""
        called = []
        context.jscript(lambda: called.append(True) or "x")
        assert called == []

    def test_export_runs_fn_then_exports(self, context, counter):
        """Test export() runs the builder and exports the current module."""
        m = Module("m")
        context.module(m)
        exported = context.export(lambda: m.define_function("f", counter), "M")
        assert exported is context.jimport("M")
        assert exported.has_function("f")

    def test_export_without_module(self, context):
        """Test export() with no current module stores nothing."""
        assert context.export(lambda: None, "M") is None
        assert len(context.registry) == 0

    def test_export_picks_up_module_set_in_fn(self, context, counter):
        """Test a builder may select the module inside export()."""
        m = Module("m")
        m.define_function("f", counter)
        context.export(lambda: context.module(m), "M")
        assert context.jimport("M").has_function("f")

    def test_export_includes_script(self, context):
        """Test the script attached by jscript is exported."""
        m = Module("m")
        context.init(m, lambda: None)
        context.jscript(lambda: 'println("hi")')
        context.export(lambda: None, "M")
        assert context.jimport("M").script == 'println("hi")'


class TestRuntimeUtilities:
    """Tests for jimport / jcall / jexit / run."""

    def test_jimport_missing(self, context):
        assert context.jimport("nope") is None

    def test_jcall(self, counted_context, counter):
        """Test jcall invokes the function."""
        assert counted_context.jcall("M", "f") is True
        assert counter.count == 1

    def test_jcall_silent_on_miss(self, counted_context, counter, caplog):
        """Test jcall does nothing and logs nothing when the target is missing."""
        caplog.set_level(logging.WARNING)
        assert counted_context.jcall("M", "missing") is False
        assert counted_context.jcall("Nope", "f") is False
        assert counter.count == 0
        assert [r for r in caplog.records if r.levelno >= logging.WARNING] == []

    def test_jexit(self, context, capsys):
        """Test jexit prints the notice and raises SystemExit."""
        with pytest.raises(SystemExit) as exc_info:
            context.jexit(4)
        assert exc_info.value.code == 4
        assert isinstance(exc_info.value, ProgramExit)
        assert capsys.readouterr().out == "[juli] Exiting with code 4\n"

    def test_jexit_default(self, context):
        with pytest.raises(SystemExit) as exc_info:
            context.jexit()
        assert exc_info.value.code == 0

    def test_run(self, counted_context, counter):
        """Test run() executes against the context registry."""
        result = counted_context.run([{"type": "call", "name": "M.f"}])
        assert result.state == ExecutorState.COMPLETED
        assert counter.count == 1

    def test_run_uses_config(self, counted_context):
        """Test run() honours the context configuration."""
        counted_context.config = ExecutionConfig(report_unknown_modules=True)
        result = counted_context.run([{"type": "call", "name": "Nope.f"}])
        assert result.diagnostics == ["Unknown module: Nope"]

    def test_contexts_are_isolated(self, counter):
        """Test two contexts do not share registries."""
        first = RuntimeContext()
        second = RuntimeContext()
        m = Module("m")
        m.define_function("f", counter)
        first.registry.export("M", m.snapshot())
        assert first.jimport("M") is not None
        assert second.jimport("M") is None
        second.run([{"type": "call", "name": "M.f"}])
        assert counter.count == 0


class TestPlugins:
    """Tests for plugin loading."""

    def test_load_plugin(self, context, plugin_factory):
        """Test register(context) is called."""
        name = plugin_factory("juli_plugin_ok", (
            "from juli.runtime.module import Module\n"
            "\n"
            "def register(context):\n"
            "    m = Module('greeter')\n"
            "    m.define_function('hello', lambda: print('hello'))\n"
            "    context.registry.export('Greeter', m.snapshot())\n"
        ))
        context.load_plugin(name)
        assert context.jimport("Greeter").has_function("hello")

    def test_plugin_without_register(self, context, plugin_factory):
        """Test a plugin lacking register() is rejected."""
        name = plugin_factory("juli_plugin_noreg", "VALUE = 1\n")
        with pytest.raises(PluginError) as exc_info:
            context.load_plugin(name)
        assert "register" in str(exc_info.value)

    def test_plugin_not_found(self, context):
        """Test an unimportable plugin is rejected."""
        with pytest.raises(PluginError):
            context.load_plugin("juli_plugin_that_does_not_exist")
