"""KDL document model.

Typed values, a node/document tree, a tree builder that assembles documents
from event streams, a flattener that turns them back into events or
canonical KDL text, and a marshal protocol for host records.

Progressive API Disclosure:
- Level 1: Simple functions - parse_events(), loads(), flatten(), dumps()
- Level 2: Configured processor - KDLProcessor class
- Level 3: Components - TreeBuilder, TreeEmitter and event sinks
"""

__version__ = "0.1.0"
__author__ = "kdl-document developers"

# Level 1: Simple functions
# Level 2: Configured processor
from .api import KDLProcessor, dump, dumps, flatten, load_file, loads, parse_events

# Level 3: Components
from .emitter import TreeEmitter
from .events import Event, EventKind, KdlTextSink, RecordingSink

# Marshal protocol
from .marshal import (
    DocumentMarshaller,
    DocumentUnmarshaller,
    Marshaller,
    Unmarshaller,
    marshal_all,
    marshal_document,
    unmarshal_all,
    unmarshal_document,
)

# Configuration and errors
from .shared import (
    BuilderConfig,
    EmitError,
    EmitterConfig,
    GlobalConfig,
    InvalidIndexError,
    KDLConfig,
    KDLError,
    KdlVersion,
    KindMismatchError,
    MarshalError,
    NotFoundError,
    ParseError,
    PrecisionLossError,
    RangeError,
    StructuralError,
    is_not_found,
)

# Document tree
from .tree import KV, Document, Node, TreeBuilder, get, get_child_value, get_or_default, set_value

# Values
from .values import (
    BigFloat,
    BigInt,
    Boolean,
    Float,
    Integer,
    Null,
    String,
    Value,
    as_big_float,
    as_big_integer,
    as_bool,
    as_float64,
    as_int,
    as_int64,
    as_null,
    as_string,
    cast_all,
    new_value,
    optional,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "dump",
    "dumps",
    "flatten",
    "load_file",
    "loads",
    "parse_events",

    # Level 2: Configured processor
    "KDLProcessor",

    # Level 3: Components
    "Event",
    "EventKind",
    "KdlTextSink",
    "RecordingSink",
    "TreeBuilder",
    "TreeEmitter",

    # Document tree
    "KV",
    "Document",
    "Node",
    "get",
    "get_child_value",
    "get_or_default",
    "set_value",

    # Values
    "BigFloat",
    "BigInt",
    "Boolean",
    "Float",
    "Integer",
    "Null",
    "String",
    "Value",
    "as_big_float",
    "as_big_integer",
    "as_bool",
    "as_float64",
    "as_int",
    "as_int64",
    "as_null",
    "as_string",
    "cast_all",
    "new_value",
    "optional",

    # Marshal protocol
    "DocumentMarshaller",
    "DocumentUnmarshaller",
    "Marshaller",
    "Unmarshaller",
    "marshal_all",
    "marshal_document",
    "unmarshal_all",
    "unmarshal_document",

    # Configuration and errors
    "BuilderConfig",
    "EmitError",
    "EmitterConfig",
    "GlobalConfig",
    "InvalidIndexError",
    "KDLConfig",
    "KDLError",
    "KdlVersion",
    "KindMismatchError",
    "MarshalError",
    "NotFoundError",
    "ParseError",
    "PrecisionLossError",
    "RangeError",
    "StructuralError",
    "is_not_found",
]
