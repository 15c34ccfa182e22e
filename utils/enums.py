from enum import Enum, auto

class BackendType(Enum):
    AUTO = auto()
    PYTHON = auto()
    CPU = auto()

class RenderState(Enum):
    UNRENDERED = auto()
    PARTITIONED = auto()
    RENDERING = auto()
    COMPLETE = auto()
