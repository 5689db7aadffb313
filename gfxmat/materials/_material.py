from typing import Iterator, Tuple, Any

import numpy as np

from ..compiler.artifact import ProgramArtifact
from ..compiler.types import PROPERTY_TYPES
from ..utils import ReadOnlyDict, assert_type, logger
from ..utils.enums import PropertyType


class Material:
    """A material instance: a compiled program plus the values of its properties.

    Parameters
    ----------
    program : ProgramArtifact
        The compiled program. Multiple materials can share one program.

    Scalar, vector and color properties are stored in ``uniform_data``, a numpy
    structured array that has the layout of the uniform buffer. Texture
    properties are stored as opaque handles in ``textures``; what a handle is,
    is up to the binding layer.
    """

    def __init__(self, program: ProgramArtifact) -> None:
        assert_type("program", program, ProgramArtifact)
        self._program = program
        self._declarations = {prop.name: prop for prop in program.properties}
        self._uniform_data = program.create_uniform_data()
        self._textures = {}

    def __repr__(self):
        return f"<Material with {len(self._declarations)} properties at {hex(id(self))}>"

    @property
    def program(self) -> ProgramArtifact:
        """The compiled program that this material provides values for."""
        return self._program

    @property
    def uniform_data(self) -> np.ndarray:
        """The uniform-upload buffer, a numpy structured array.

        Writing to this array directly bypasses validation.
        """
        return self._uniform_data

    @property
    def textures(self) -> ReadOnlyDict:
        """A read-only mapping of the texture properties that have a handle bound."""
        return ReadOnlyDict(self._textures)

    def _get_declaration(self, name):
        try:
            return self._declarations[name]
        except KeyError:
            raise KeyError(f"Material has no property {name!r}.") from None

    def set_property(self, name: str, value: Any) -> None:
        """Set the value of a property.

        Raises KeyError for an unknown name, and ValueError when the value
        does not match the type of the property. A texture handle can be
        any hashable object except None.
        """
        prop = self._get_declaration(name)
        if prop.type == PropertyType.Texture2d:
            if value is None:
                raise ValueError(f"Cannot set texture property {name!r} to None.")
            try:
                hash(value)
            except TypeError:
                raise ValueError(
                    f"Texture handle for {name!r} must be hashable, got {value!r}."
                ) from None
            self._textures[name] = value
            return

        components = PROPERTY_TYPES[prop.type].components
        try:
            array = np.asarray(value, dtype=np.float32)
        except (TypeError, ValueError):
            raise ValueError(
                f"Property {name!r} expects numbers, got {value!r}."
            ) from None
        expected_shape = () if components == 1 else (components,)
        if array.shape != expected_shape:
            if components == 1:
                what = "a single number"
            else:
                what = f"{components} numbers"
            raise ValueError(f"Property {name!r} ({prop.type}) expects {what}.")
        self._uniform_data[name] = array

    def get_property(self, name: str) -> Any:
        """Get the current value of a property.

        Scalars are returned as float, vectors as a tuple of floats, and
        textures as the bound handle (or None).
        """
        prop = self._get_declaration(name)
        if prop.type == PropertyType.Texture2d:
            return self._textures.get(name, None)
        value = self._uniform_data[name]
        if value.shape == ():
            return float(value)
        return tuple(float(v) for v in value)

    def clear_property(self, name: str) -> Any:
        """Restore the default value of a property. Returns the previous value."""
        prop = self._get_declaration(name)
        old_value = self.get_property(name)
        if prop.type == PropertyType.Texture2d:
            self._textures.pop(name, None)
        elif prop.default is None:
            self._uniform_data[name] = 0
        else:
            self._uniform_data[name] = prop.default
        logger.debug(f"Cleared material property {name!r}.")
        return old_value

    def properties(self) -> Iterator[Tuple[str, Any]]:
        """Iterate over the (name, value) of the properties, in declaration order."""
        for prop in self._program.properties:
            yield prop.name, self.get_property(prop.name)
