import dataclasses as dc

### AST CLASS ###

# Statement and Expression Objects for ast
# maintain line/column information for errors
# positions are keyword only so they stay out of match patterns
# and out of equality, two parses of the same text compare equal
# pprint() -> str for display

@dc.dataclass
class AST:
    line        : int = dc.field(kw_only = True, default = 0, compare = False)
    column      : int = dc.field(kw_only = True, default = 0, compare = False)

    def pprint(self):
        return "base ast"
