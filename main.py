from rich.pretty import pprint

import subcommander
from subcommander import *

__styles__ = {"error-title": "bold red"}


class Add(Command):
    usage_suffix = "TEXT..."

    def __init__(self):
        self.tags = []

    def define_parameters(self, options):
        @options.on("-t", "--tag NAME", help="Attach a tag (repeatable)")
        def tag(value):
            self.tags.append(value)

    def run(self, *words):
        if not words:
            raise DispatchError("nothing to add", 2)
        notes.append((" ".join(words), tuple(self.tags)))


class Counter:
    def __init__(self):
        self.value = 0
        self.step = 1

    def define_parameters(self, options):
        options.on("-s", "--step INTEGER", type=int, help="Set the step", callback=self.set_step)

    def set_step(self, step):
        self.step = step

    def run(self):
        self.value += self.step
        print(self.value)


notes = []


def commands(registrar):
    registrar.command("add", Add, ["new"], "Add a note")
    registrar.object_command("count", Counter(), "Bump a counter")

    @registrar.block_command("list", ["ls"], "List the notes")
    def listing(entry):
        @entry.run
        def run(args):
            for text, tags in notes:
                print(text, *("#" + tag for tag in tags))


if __name__ == '__main__':
    toplevel = Toplevel("notes", subcommander.__version__, registrar=commands)
    toplevel.parse()
    if toplevel.context.verbose:
        pprint(toplevel.context)
