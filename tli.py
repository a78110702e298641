from tl.tools import Tools
from tl.parser import Parser
from tl.reporter import Reporter, TLError

def main(argv = None):
    """
    usage:
    python3 tli.py <filename>.tl [--ast]

    runs the program, or prints its statements with --ast
    """
    # preliminary objects
    reporter    = Reporter()
    tools       = Tools(reporter)
    parser      = Parser(reporter)

    # parse args
    reporter.checkpoint("args")
    args = tools.parseargs(argv)

    # file to source text
    reporter.checkpoint("reading")
    source = tools.readsource(args.input)

    # source text to statements
    reporter.checkpoint("parsing")
    try:
        prgm = parser.to_prgm(source)
    except TLError as e:
        reporter.crash(str(e))

    # statements to output
    reporter.checkpoint("running")
    if args.ast:
        print(prgm.pprint())
    else:
        prgm.run()

    reporter.checkpoint("end")


if __name__ == "__main__":
    main()
