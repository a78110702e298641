import argparse

class Tools:
    def __init__(self, reporter):
        self.reporter = reporter

    def parseargs(self, argv = None):
        """
        return the parsed command line: input filename and --ast flag
        """
        parser = argparse.ArgumentParser(
            prog="tli",
            description="run a TinyLang program",
        )
        parser.add_argument("input", help="source file, <filename>.tl")
        parser.add_argument("--ast", action="store_true",
                            help="print the parsed statements instead of running them")

        args = parser.parse_args(argv)

        if not args.input.endswith(".tl"):
            self.reporter.warn(f"expected '.tl' file, got {args.input}")

        return args

    def readsource(self, filename):
        """
        return the contents of the source file
        """
        try:
            with open(filename, "r") as f:
                return f.read()

        except OSError as e:
            self.reporter.crash(f"cannot read {{{filename}}}: {e.strerror}")

        except UnicodeDecodeError:
            self.reporter.crash(f"cannot read {{{filename}}}: not a text file")
