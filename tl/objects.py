import dataclasses as dc

from typing import Optional as Opt

from .statement import ClassDef, FunctionDef
from .value     import Value, ZERO, SCALAR_TYPES

### CLASSES, OBJECTS AND ARRAYS ###

# heap entities, kept in the interpreter's registries by name
# they are referenced, never copied

@dc.dataclass
class Class:
    name        : str
    base        : Opt['Class']
    fields      : dict[str, str]            # resolved: field name -> declared type
    methods     : dict[str, FunctionDef]    # resolved: method name -> definition

    @staticmethod
    def resolve(definition: ClassDef, base: Opt['Class']):
        """
        merge root to leaf, a derived field or method replaces the base one
        the base is already resolved, so only this level is overlaid
        """
        fields  = dict(base.fields)  if base else dict()
        methods = dict(base.methods) if base else dict()

        for type_, name in definition.fields:
            fields[name] = type_

        for method in definition.methods:
            methods[method.name] = method

        return Class(definition.name, base, fields, methods)

    def lineage(self):
        """
        class names from this class up to the root
        """
        class_ = self
        while class_ is not None:
            yield class_.name
            class_ = class_.base

    def instantiate(self):
        return Instance(self, {
            name: ZERO[type_] for name, type_ in self.fields.items()
        })

@dc.dataclass(eq = False)
class Instance:
    class_      : Class
    fields      : dict[str, Value]

    def pprint(self):
        return f"<{self.class_.name} object>"

@dc.dataclass(eq = False)
class Array:
    type_       : str                       # scalar type name or class name
    items       : list[Value | Instance]
    growable    : bool = False

    def __len__(self):
        return len(self.items)

    def holds_objects(self):
        return self.type_ not in SCALAR_TYPES
