import contextlib as cl

from .value import Value

class Scope:
    """
    stack of variable frames, the bottom frame is global
    one frame is opened per function / method / constructor call
    lookups walk from the innermost frame outwards
    """
    def __init__(self):
        self.vars = [dict()]

    def open(self):
        self.vars.append(dict())

    def close(self):
        assert(len(self.vars) > 1)
        self.vars.pop()

    @cl.contextmanager
    def in_subscope(self):
        self.open()
        try:
            yield self
        finally:
            self.close()

    def __contains__(self, name: str):
        return any(name in frame for frame in self.vars)

    def __getitem__(self, name: str) -> Value:
        for frame in reversed(self.vars):
            if name in frame:
                return frame[name]
        raise KeyError(name)

    def push(self, name: str, value: Value):
        # declarations only ever write the current frame
        self.vars[-1][name] = value

    def assign(self, name: str, value: Value):
        # assignment updates the nearest existing binding, or declares locally
        for frame in reversed(self.vars):
            if name in frame:
                frame[name] = value
                return
        self.push(name, value)

    def local(self, name: str) -> Value:
        return self.vars[-1][name]

