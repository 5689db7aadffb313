"""
The program artifact: the immutable result of a successful compilation.
"""

from collections import namedtuple

import numpy as np

from ..utils import ReadOnlyDict, hash_from_value
from ..utils.enums import StageKind
from .types import PROPERTY_TYPES


PropertyBinding = namedtuple(
    "PropertyBinding", ["index", "name", "type", "glsl_type", "default"]
)


def uniform_dtype_from_properties(properties):
    """Get a numpy structured dtype for the non-texture properties.

    The fields are in declaration order and aligned following the std140
    rules: scalars on 4 bytes, vec2 on 8 bytes, vec3 and vec4 on 16 bytes.
    The struct size is padded to a multiple of 16. Padding is explicit, in
    fields named ``__paddingN``.
    """
    dtype_fields = []
    pad_index = 0
    i = 0  # bytes processed

    for prop in properties:
        info = PROPERTY_TYPES[prop.type]
        if info.buffer_format is None:
            continue
        n = info.components
        align = {1: 4, 2: 8}.get(n, 16)
        too_many_bytes = i % align
        if too_many_bytes:
            need_bytes = align - too_many_bytes
            pad_index += 1
            dtype_fields.append((f"__padding{pad_index}", "uint8", (need_bytes,)))
            i += need_bytes
        shape = () if n == 1 else (n,)
        dtype_fields.append((prop.name, "float32", shape))
        i += 4 * n

    # Add padding to the struct
    too_many_bytes = i % 16
    if too_many_bytes:
        need_bytes = 16 - too_many_bytes
        pad_index += 1
        dtype_fields.append((f"__padding{pad_index}", "uint8", (need_bytes,)))

    return np.dtype(dtype_fields)


class ProgramArtifact:
    """The compiled program: the GLSL text for both stages, plus the property table.

    The artifact is immutable. It is handed to the binding layer, which
    compiles and links the stage texts, and to the material layer, which uses
    the property table to upload uniforms.
    """

    __slots__ = [
        "_vertex_source",
        "_fragment_source",
        "_properties",
        "_required_globals",
        "_interface_slots",
        "_hash",
    ]

    def __init__(
        self,
        vertex_source,
        fragment_source,
        properties,
        required_globals,
        interface_slots=(),
    ):
        set_ = object.__setattr__
        set_(self, "_vertex_source", str(vertex_source))
        set_(self, "_fragment_source", str(fragment_source))
        set_(self, "_properties", tuple(properties))
        set_(self, "_required_globals", frozenset(required_globals))
        set_(self, "_interface_slots", tuple(interface_slots))
        set_(self, "_hash", None)

    def __setattr__(self, name, value):
        raise AttributeError("A ProgramArtifact cannot be modified.")

    def __delattr__(self, name):
        raise AttributeError("A ProgramArtifact cannot be modified.")

    def __repr__(self):
        return f"<ProgramArtifact with {len(self._properties)} properties at {hex(id(self))}>"

    @property
    def vertex_source(self):
        """The GLSL text of the vertex stage."""
        return self._vertex_source

    @property
    def fragment_source(self):
        """The GLSL text of the fragment stage."""
        return self._fragment_source

    @property
    def sources(self):
        """A read-only dict mapping stage kind ('vert', 'frag') to GLSL text."""
        return ReadOnlyDict(
            {
                StageKind.vertex: self._vertex_source,
                StageKind.fragment: self._fragment_source,
            }
        )

    @property
    def properties(self):
        """The PropertyDeclaration objects, in declaration order."""
        return self._properties

    @property
    def required_globals(self):
        """The names of the engine globals that the program uses."""
        return self._required_globals

    @property
    def interface_slots(self):
        """The InterfaceSlot objects: the vertex outputs, then the matching fragment inputs."""
        return self._interface_slots

    @property
    def hash(self):
        """A hash of the content, stable between processes.

        Identical shader definitions produce artifacts with identical hashes,
        so this can be used as a key for a shader cache.
        """
        if self._hash is None:
            value = [
                self._vertex_source,
                self._fragment_source,
                [[b.name, b.type, b.default] for b in self.get_property_bindings()],
            ]
            object.__setattr__(self, "_hash", hash_from_value(value))
        return self._hash

    def get_property_bindings(self):
        """Get the property-binding table, a tuple of PropertyBinding in declaration order.

        External callers that bind by index can use the ``index`` field.
        """
        return tuple(
            PropertyBinding(i, prop.name, prop.type, prop.glsl_type, prop.default)
            for i, prop in enumerate(self._properties)
        )

    def uniform_dtype(self):
        """The numpy dtype of the uniform-upload buffer (texture properties excluded)."""
        return uniform_dtype_from_properties(self._properties)

    def create_uniform_data(self):
        """Create a uniform-upload buffer, filled with the property defaults."""
        data = np.zeros((), dtype=self.uniform_dtype())
        for prop in self._properties:
            if prop.default is not None:
                data[prop.name] = prop.default
        return data
