from typing import Dict, Optional
from toys.errors import UnboundVariableError


class Environment:
    """One frame of the scope chain, mapping identifiers to int32 values.

    Frames are shared by reference: every holder of a frame sees writes made
    through any other holder. The parent link is fixed at creation.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, int] = {}

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def __repr__(self) -> str:
        return f"<Environment depth={self.depth} {self.values!r}>"

    @property
    def depth(self) -> int:
        depth = 0
        frame = self.parent
        while frame is not None:
            depth += 1
            frame = frame.parent
        return depth

    def find(self, name: str) -> Optional['Environment']:
        frame = self
        while frame is not None:
            if name in frame.values:
                return frame
            frame = frame.parent
        return None

    def get(self, name: str) -> int:
        frame = self.find(name)
        if frame is None:
            raise UnboundVariableError(f'undefined variable {name}')
        return frame.values[name]

    def set(self, name: str, value: int) -> int:
        # Always this frame: assignment shadows rather than updating an ancestor.
        self.values[name] = value
        return value

    def new_child(self) -> 'Environment':
        return Environment(parent=self)
