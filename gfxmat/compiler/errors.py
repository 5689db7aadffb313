"""
The errors raised by the compiler. Each error carries a classified reason and
the location in the shader definition, so that tooling can present it to the
author of the shader.
"""

from ..utils.enums import FailureReason


class SourceLocation:
    """A position in a shader-definition document.

    Line and column are 1-based, offset is the 0-based index in the document.
    """

    __slots__ = ["offset", "line", "column", "source_line"]

    def __init__(self, offset, line, column, source_line=""):
        self.offset = offset
        self.line = line
        self.column = column
        self.source_line = source_line

    @classmethod
    def from_offset(cls, source, offset):
        """Get the location of the given offset in the source text."""
        offset = max(0, min(offset, len(source)))
        line_start = source.rfind("\n", 0, offset) + 1
        line_end = source.find("\n", offset)
        if line_end < 0:
            line_end = len(source)
        line = source.count("\n", 0, offset) + 1
        column = offset - line_start + 1
        return cls(offset, line, column, source[line_start:line_end])

    def __eq__(self, other):
        if not isinstance(other, SourceLocation):
            return NotImplemented
        return (self.offset, self.line, self.column) == (
            other.offset,
            other.line,
            other.column,
        )

    def __hash__(self):
        return hash((self.offset, self.line, self.column))

    def __repr__(self):
        return f"<SourceLocation {self.line}:{self.column}>"

    def __str__(self):
        return f"{self.line}:{self.column}"


class ShaderCompileError(Exception):
    """Base class for the errors of a failed compilation."""

    reason = None

    def __init__(self, message, location=None):
        self.message = message
        self.location = location
        super().__init__(self._format())

    def _format(self):
        if self.location is None:
            return self.message
        text = f"{self.location}: {self.message}"
        if self.location.source_line.strip():
            text += "\n" + self.location.source_line
            text += "\n" + " " * (self.location.column - 1) + "^"
        return text


class ShaderSyntaxError(ShaderCompileError):
    """A malformed declaration or program block."""

    reason = FailureReason.syntax


class DuplicateSymbolError(ShaderCompileError):
    """A property name collides with another property or an engine global.

    The ``conflict`` is the declaration that was there first (a
    PropertyDeclaration or an EngineGlobal). The ``conflict_location`` is
    None when the conflict is built into the compiler.
    """

    reason = FailureReason.duplicate_symbol

    def __init__(self, message, location=None, conflict=None):
        self.conflict = conflict
        self.conflict_location = None
        if isinstance(getattr(conflict, "location", None), SourceLocation):
            self.conflict_location = conflict.location
        super().__init__(message, location)


class MissingStageError(ShaderCompileError):
    """A required stage is absent, or present more than once."""

    reason = FailureReason.missing_stage


class UnresolvedReferenceError(ShaderCompileError):
    """An intrinsic reference does not resolve to any known symbol."""

    reason = FailureReason.unresolved_reference

    def __init__(self, message, location=None, name=None):
        self.name = name
        super().__init__(message, location)


class TypeMismatchError(ShaderCompileError):
    """A value that crosses the stage boundary has an unknown or inconsistent type."""

    reason = FailureReason.type_mismatch

    def __init__(self, message, location=None, other_location=None):
        self.other_location = other_location
        super().__init__(message, location)


class MissingOutputError(ShaderCompileError):
    """The fragment stage never writes the final color."""

    reason = FailureReason.missing_output
