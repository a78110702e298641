from .statement   import Block
from .reporter    import Reporter, TLError
from .interpreter import Interpreter

### PROGRAM CLASS ###

# holds the parsed top level statements
# runs them in run(), errors go to the reporter when there is one

class Program:
    def __init__(self, block: Block, reporter: Reporter = None):
        self.block      = block     # Block
        self.reporter   = reporter  # Reporter

    def pprint(self):
        return "\n".join(stmt.pprint() for stmt in self.block)

    def run(self, interpreter: Interpreter = None):
        interpreter = interpreter or Interpreter()

        try:
            interpreter.run(self.block)

        except TLError as e:
            if self.reporter is None:
                raise
            self.reporter.log(e)

        if self.reporter is not None:
            self.reporter.checkpoint()

        return interpreter
