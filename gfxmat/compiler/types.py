"""
The types known to the compiler, and how they map to GLSL.
"""

from collections import namedtuple

from ..utils import ReadOnlyDict
from ..utils.enums import PropertyType


PropertyTypeInfo = namedtuple(
    "PropertyTypeInfo", ["glsl_type", "components", "buffer_format"]
)

# The buffer format uses the same notation as numpy-ish shader types: "f4" is a
# float32 and "3xf4" a vector of three float32. Textures are not buffered.
PROPERTY_TYPES = ReadOnlyDict(
    {
        PropertyType.f32: PropertyTypeInfo("float", 1, "f4"),
        PropertyType.Vector2: PropertyTypeInfo("vec2", 2, "2xf4"),
        PropertyType.Vector3: PropertyTypeInfo("vec3", 3, "3xf4"),
        PropertyType.Vector4: PropertyTypeInfo("vec4", 4, "4xf4"),
        PropertyType.Color: PropertyTypeInfo("vec4", 4, "4xf4"),
        PropertyType.Texture2d: PropertyTypeInfo("sampler2D", 0, None),
    }
)


# Types that can be interpolated between the vertex and fragment stage
interpolatable_types = ["float", "vec2", "vec3", "vec4"]

# Integer types are passed as is, and need the "flat" qualifier
flat_types = ["int", "ivec2", "ivec3", "ivec4"] + ["uint", "uvec2", "uvec3", "uvec4"]
interpolatable_types = interpolatable_types + flat_types

# Types that may appear in a local declaration that reads a varying
value_types = interpolatable_types + [
    "bool",
    "bvec2",
    "bvec3",
    "bvec4",
    "mat2",
    "mat3",
    "mat4",
]


def format_glsl_value(glsl_type, value):
    """Format a (default) value as a GLSL expression, e.g. ``vec2(1.0, 0.5)``."""
    if isinstance(value, (int, float)):
        return repr(float(value))
    parts = ", ".join(repr(float(v)) for v in value)
    return f"{glsl_type}({parts})"
