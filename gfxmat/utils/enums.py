"""
The enums used in gfxmat. The enums are all available from the root ``gfxmat`` namespace.
"""

from wgpu.utils import BaseEnum


__all__ = [
    "StageKind",
    "PropertyType",
    "SymbolKind",
    "FailureReason",
]


class Enum(BaseEnum):
    """Enum base class for gfxmat."""


class StageKind(Enum):
    """The two program stages of a shader definition. The values are the block names."""

    vertex = "vert"  #: Per-vertex transform stage, ``program vert { ... }``.
    fragment = "frag"  #: Per-pixel shading stage, ``program frag { ... }``.


class PropertyType(Enum):
    """The closed set of types that a ``property`` declaration can have."""

    f32 = None  #: A scalar float.
    Vector2 = None  #: A 2-component float vector.
    Vector3 = None  #: A 3-component float vector.
    Vector4 = None  #: A 4-component float vector.
    Color = None  #: An rgba color, a 4-component float vector in the shader.
    Texture2d = None  #: A handle to a 2D texture, sampled in the shader.


class SymbolKind(Enum):
    """What a name in the symbol table refers to."""

    property = None  #: A declared material property, bound as a uniform.
    engine_global = None  #: A uniform that the engine provides for every shader.
    attribute = None  #: A per-vertex attribute, only available in the vertex stage.
    varying = None  #: A value passed from the vertex stage to the fragment stage.
    sink = None  #: The final color written by the fragment stage.
    builtin = None  #: A stage builtin, like the clip-space position.


class FailureReason(Enum):
    """The classified reason of a failed compilation."""

    syntax = None  #: Malformed declaration or program block.
    duplicate_symbol = None  #: A property collides with another property or engine global.
    missing_stage = None  #: The vertex or fragment stage is absent or duplicated.
    unresolved_reference = None  #: An intrinsic reference names nothing known.
    type_mismatch = None  #: A vertex output is produced and consumed with different types.
    missing_output = None  #: The fragment stage never writes the final color.
