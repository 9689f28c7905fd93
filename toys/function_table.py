from typing import Dict, Iterator
from toys.ast import FunctionDefinition
from toys.errors import ToysError, UndefinedFunctionError


class FunctionTable:
    """Name to FunctionDefinition lookup, populated once while loading.

    Later definitions with the same name replace earlier ones. Once
    `freeze` has been called the table is read-only.
    """
    def __init__(self):
        self.functions: Dict[str, FunctionDefinition] = {}
        self.frozen = False

    def __contains__(self, name: str) -> bool:
        return name in self.functions

    def __iter__(self) -> Iterator[str]:
        return iter(self.functions)

    def __len__(self) -> int:
        return len(self.functions)

    def register(self, definition: FunctionDefinition) -> None:
        if self.frozen:
            raise ToysError(f'cannot define function {definition.name} after loading')
        self.functions[definition.name] = definition

    def get(self, name: str) -> FunctionDefinition:
        if name not in self.functions:
            raise UndefinedFunctionError(f'undefined function {name}')
        return self.functions[name]

    def freeze(self) -> None:
        self.frozen = True
