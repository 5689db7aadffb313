"""
The symbol table: a per-compilation arena of named symbols. It is seeded with
the engine globals (uniforms that the engine sets for every shader) and the
vertex attributes, and then the declared properties are added.
"""

from collections import namedtuple

from ..utils import ReadOnlyDict
from ..utils.enums import SymbolKind, StageKind
from .errors import DuplicateSymbolError


EngineGlobal = namedtuple("EngineGlobal", ["name", "type", "semantic"])
VertexAttribute = namedtuple("VertexAttribute", ["name", "type", "location"])


def _create_engine_globals():
    engine_globals = [
        EngineGlobal("model_transform", "mat4", "transform"),
        EngineGlobal("view_transform", "mat4", "transform"),
        EngineGlobal("model_view_transform", "mat4", "transform"),
        EngineGlobal("projection_transform", "mat4", "transform"),
        EngineGlobal("model_view_projection", "mat4", "transform"),
        EngineGlobal("normal_transform", "mat3", "transform"),
        EngineGlobal("view_normal_transform", "mat3", "transform"),
        EngineGlobal("camera_position", "vec4", "camera"),
        EngineGlobal("light_position", "vec4", "light"),
        EngineGlobal("light_strength", "float", "light"),
        EngineGlobal("light_radius", "float", "light"),
        EngineGlobal("light_color", "vec4", "light"),
        EngineGlobal("global_ambient", "vec4", "ambient"),
    ]
    return ReadOnlyDict((g.name, g) for g in engine_globals)


# The process-wide table of engine globals. Read-only, so it can be shared
# between compilations without locking.
ENGINE_GLOBALS = _create_engine_globals()

VERTEX_ATTRIBUTES = ReadOnlyDict(
    (a.name, a)
    for a in [
        VertexAttribute("vertex_position", "vec4", 0),
        VertexAttribute("vertex_normal", "vec3", 1),
        VertexAttribute("vertex_uv", "vec2", 2),
    ]
)

# The final color of the fragment stage, written as ``@color``
SINK_NAME = "color"


class Symbol:
    """A named entry in the symbol table.

    The declaration is the object that defines the symbol (a
    PropertyDeclaration, EngineGlobal or VertexAttribute); it is referenced,
    not copied.
    """

    __slots__ = ["kind", "name", "type", "declaration"]

    def __init__(self, kind, name, type, declaration=None):
        self.kind = kind
        self.name = name
        self.type = type
        self.declaration = declaration

    def __repr__(self):
        return f"<Symbol {self.kind} {self.name}: {self.type}>"


class SymbolTable:
    """The namespace of a single compilation.

    Parameters
    ----------
    engine_globals : ReadOnlyDict | None
        The table of engine globals, mapping name to EngineGlobal. Default
        ``ENGINE_GLOBALS``.
    """

    def __init__(self, engine_globals=None):
        if engine_globals is None:
            engine_globals = ENGINE_GLOBALS
        self._engine_globals = engine_globals
        self._symbols = {}
        self._attributes = {}
        self._properties = []

        for g in engine_globals.values():
            self._symbols[g.name] = Symbol(SymbolKind.engine_global, g.name, g.type, g)
        for a in VERTEX_ATTRIBUTES.values():
            self._attributes[a.name] = Symbol(SymbolKind.attribute, a.name, a.type, a)

    @property
    def engine_globals(self):
        """The read-only table of engine globals."""
        return self._engine_globals

    @property
    def properties(self):
        """The declared properties, in declaration order."""
        return tuple(self._properties)

    def declare_property(self, prop):
        """Add a PropertyDeclaration to the table.

        Properties may not shadow engine globals, vertex attributes, the final
        color, or each other.
        """
        name = prop.name
        if name == SINK_NAME:
            raise DuplicateSymbolError(
                f"Property {name!r} collides with the final color '@{SINK_NAME}'.",
                prop.location,
            )
        existing = self._symbols.get(name, None) or self._attributes.get(name, None)
        if existing is not None:
            if existing.kind == SymbolKind.property:
                msg = f"Property {name!r} is already declared at {existing.declaration.location}."
            elif existing.kind == SymbolKind.engine_global:
                semantic = existing.declaration.semantic
                msg = f"Property {name!r} collides with the engine global {name!r} ({semantic})."
            else:
                msg = f"Property {name!r} collides with the vertex attribute {name!r}."
            raise DuplicateSymbolError(msg, prop.location, existing.declaration)

        self._symbols[name] = Symbol(SymbolKind.property, name, prop.glsl_type, prop)
        self._properties.append(prop)

    def lookup(self, name, stage_kind=None):
        """Get the Symbol for the given name, or None.

        Vertex attributes are only found when stage_kind is the vertex stage.
        """
        symbol = self._symbols.get(name, None)
        if symbol is None and stage_kind == StageKind.vertex:
            symbol = self._attributes.get(name, None)
        return symbol

    def __contains__(self, name):
        return name in self._symbols or name in self._attributes

    def __len__(self):
        return len(self._symbols)


def build_symbol_table(document, engine_globals=None):
    """Build the SymbolTable for a parsed ShaderDocument."""
    table = SymbolTable(engine_globals)
    for prop in document.properties:
        table.declare_property(prop)
    return table
