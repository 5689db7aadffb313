"""
Implements the compiler object. It runs the stages of the compilation in
order: parse, build the symbol table, resolve the references, and generate the
GLSL. Each stage raises on the first error it finds, so later stages never see
an invalid program.
"""

import os

from ..utils import logger, assert_type, ReadOnlyDict
from .parser import parse_shader_definition
from .symbols import build_symbol_table, ENGINE_GLOBALS
from .resolve import resolve_program
from .codegen import generate_program_sources
from .artifact import ProgramArtifact


DEFAULT_GLSL_VERSION = "330 core"


def _get_default_glsl_version():
    # A user-specified default can be given via an environment variable
    version = os.getenv("GFXMAT_GLSL_VERSION", "").strip()
    return version or DEFAULT_GLSL_VERSION


_default_glsl_version = _get_default_glsl_version()


class ShaderCompiler:
    """Compiles shader definitions into ProgramArtifact objects.

    The compiler holds only configuration, so one compiler can be used from
    multiple threads at the same time.

    Parameters
    ----------
    glsl_version : str | None
        The version/profile marker written at the top of each stage, e.g.
        "330 core". Default from the ``GFXMAT_GLSL_VERSION`` environment
        variable, or "330 core".
    engine_globals : ReadOnlyDict | None
        The table of engine globals (name -> EngineGlobal). Default
        ``ENGINE_GLOBALS``.
    """

    def __init__(self, glsl_version=None, engine_globals=None):
        if glsl_version is None:
            glsl_version = _default_glsl_version
        assert_type("glsl_version", glsl_version, str)
        if not glsl_version.strip() or "\n" in glsl_version:
            raise ValueError(f"Invalid glsl_version: {glsl_version!r}")
        if engine_globals is None:
            engine_globals = ENGINE_GLOBALS
        assert_type("engine_globals", engine_globals, ReadOnlyDict)

        self._glsl_version = glsl_version.strip()
        self._engine_globals = engine_globals

    @property
    def glsl_version(self):
        """The version/profile marker of the generated GLSL."""
        return self._glsl_version

    @property
    def engine_globals(self):
        """The read-only table of engine globals."""
        return self._engine_globals

    def compile(self, source):
        """Compile shader-definition text into a ProgramArtifact.

        Raises a subclass of ShaderCompileError if the definition is invalid.
        """
        assert_type("source", source, str)
        logger.debug(
            f"Compiling shader ({len(source)} characters, GLSL {self._glsl_version})."
        )

        document = parse_shader_definition(source)
        symbols = build_symbol_table(document, self._engine_globals)
        program = resolve_program(document, symbols)
        vertex_source, fragment_source = generate_program_sources(
            program, self._glsl_version
        )

        artifact = ProgramArtifact(
            vertex_source,
            fragment_source,
            symbols.properties,
            program.required_globals,
            program.interface_slots,
        )
        logger.debug(f"Compiled shader {artifact.hash[:12]}.")
        return artifact

    def compile_file(self, filename):
        """Compile a shader-definition file into a ProgramArtifact."""
        with open(filename, "rb") as f:
            source = f.read().decode()
        logger.debug(f"Compiling shader definition {filename}")
        return self.compile(source)


def compile_shader(source, **kwargs):
    """Compile shader-definition text into a ProgramArtifact.

    Keyword arguments are passed to ``ShaderCompiler``.
    """
    return ShaderCompiler(**kwargs).compile(source)
