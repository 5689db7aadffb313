"""
This subpackage defines the material compiler. Basically this is where a
shader definition is turned into GLSL for the vertex and fragment stage.


## A note about shader definitions

A shader definition declares the properties of a material, and the code for
the vertex and fragment stage, in one document:

    property surface_color: Color = (1.0, 1.0, 1.0, 1.0);

    program vert {
        void main() {
            @vertex.position = model_view_projection * vertex_position;
            @vertex.normal = vec3(view_normal_transform * vertex_normal);
        }
    }

    program frag {
        void main() {
            float d = max(dot(normalize(@vertex.normal), vec3(0.0, 0.0, 1.0)), 0.0);
            @color = surface_color * (global_ambient + d);
        }
    }

The code in the program blocks is GLSL, except for the ``@``-prefixed
intrinsic references. ``@vertex.<field>`` is a value that the vertex stage
writes and the fragment stage reads, ``@color`` is the final color, and
``@<name>`` is a property, engine global, or vertex attribute. Properties and
engine globals can also be used by their bare name.

The compiler finds out which values cross the stage boundary, and generates
the uniform, attribute, and interface declarations for each stage. The body
code itself is passed through as-is.
"""

# ruff: noqa: F401

from .errors import (
    SourceLocation,
    ShaderCompileError,
    ShaderSyntaxError,
    DuplicateSymbolError,
    MissingStageError,
    UnresolvedReferenceError,
    TypeMismatchError,
    MissingOutputError,
)
from .parser import (
    PropertyDeclaration,
    StageDefinition,
    ShaderDocument,
    parse_shader_definition,
    load_shader_definition,
)
from .symbols import EngineGlobal, ENGINE_GLOBALS, VERTEX_ATTRIBUTES, SymbolTable
from .resolve import InterfaceSlot
from .artifact import ProgramArtifact, PropertyBinding
from .base import ShaderCompiler, compile_shader


__all__ = [
    "SourceLocation",
    "ShaderCompileError",
    "ShaderSyntaxError",
    "DuplicateSymbolError",
    "MissingStageError",
    "UnresolvedReferenceError",
    "TypeMismatchError",
    "MissingOutputError",
    "PropertyDeclaration",
    "StageDefinition",
    "ShaderDocument",
    "parse_shader_definition",
    "load_shader_definition",
    "EngineGlobal",
    "ENGINE_GLOBALS",
    "VERTEX_ATTRIBUTES",
    "SymbolTable",
    "InterfaceSlot",
    "ProgramArtifact",
    "PropertyBinding",
    "ShaderCompiler",
    "compile_shader",
]
