"""
Example native plugin for ``juli run``.

    juli run examples/hello.json --plugin examples.greeter
"""

from juli.runtime.context import RuntimeContext
from juli.runtime.module import Module

GREETER_SOURCE = """
fn hello() {
    println("Hello from Julk")
}
"""


def register(context: RuntimeContext) -> None:
    greeter = Module("greeter")

    def setup():
        greeter.define_function("hello", lambda: print("Hello, world!"))
        greeter.define_function("banner", lambda: greeter.attach_native_code(greeter.script))

    context.init(greeter, setup)
    context.jscript(lambda: GREETER_SOURCE)
    context.export(lambda: None, "Greeter")
