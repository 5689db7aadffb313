"""
Parse shader-definition text into a document: the declared properties and the
vertex and fragment stage definitions.
"""

from ..utils import logger
from ..utils.enums import PropertyType, StageKind
from .errors import SourceLocation, ShaderSyntaxError, MissingStageError
from .lexer import Lexer, TokenKind, tokenize_body
from .types import PROPERTY_TYPES


class PropertyDeclaration:
    """A ``property <name>: <type> [= <default>];`` declaration.

    Parameters
    ----------
    name : str
        The name of the property, also the name of its uniform.
    type : str
        One of the ``PropertyType`` values.
    default : float | tuple | None
        The default value, a float for scalars and a tuple of floats for vectors.
    location : SourceLocation | None
        Where the property is declared.
    """

    __slots__ = ["name", "type", "default", "location"]

    def __init__(self, name, type, default=None, location=None):
        if isinstance(default, list):
            default = tuple(default)
        set_ = object.__setattr__
        set_(self, "name", name)
        set_(self, "type", type)
        set_(self, "default", default)
        set_(self, "location", location)

    def __setattr__(self, name, value):
        raise AttributeError("A PropertyDeclaration cannot be modified.")

    def __delattr__(self, name):
        raise AttributeError("A PropertyDeclaration cannot be modified.")

    @property
    def glsl_type(self):
        return PROPERTY_TYPES[self.type].glsl_type

    def __repr__(self):
        return f"<PropertyDeclaration {self.name}: {self.type}>"


class StageDefinition:
    """The body of a ``program vert { ... }`` or ``program frag { ... }`` block."""

    __slots__ = [
        "stage_kind",
        "body_text",
        "chunks",
        "referenced_intrinsics",
        "identifiers",
        "location",
    ]

    def __init__(
        self, stage_kind, body_text, chunks, references, identifiers, location
    ):
        self.stage_kind = stage_kind
        self.body_text = body_text
        self.chunks = tuple(chunks)
        self.referenced_intrinsics = tuple(references)
        self.identifiers = tuple(identifiers)
        self.location = location

    def __repr__(self):
        n = len(self.referenced_intrinsics)
        return f"<StageDefinition {self.stage_kind} with {n} references>"


class ShaderDocument:
    """A parsed shader definition."""

    __slots__ = ["source", "properties", "vertex", "fragment"]

    def __init__(self, source, properties, vertex, fragment):
        self.source = source
        self.properties = tuple(properties)
        self.vertex = vertex
        self.fragment = fragment

    @property
    def stages(self):
        return (self.vertex, self.fragment)


class Parser:
    """Recursive descent parser for shader definitions."""

    def __init__(self, source):
        self.source = source
        self.lexer = Lexer(source)
        self._peeked = None

    def _location(self, offset):
        return SourceLocation.from_offset(self.source, offset)

    def _next(self):
        if self._peeked is not None:
            token, self._peeked = self._peeked, None
            return token
        return self.lexer.next()

    def _peek(self):
        if self._peeked is None:
            self._peeked = self.lexer.next()
        return self._peeked

    def _expect(self, kind, what):
        token = self._next()
        if token.kind != kind:
            found = repr(token.text) if token.text else "end of file"
            raise ShaderSyntaxError(
                f"Expected {what}, found {found}.", self._location(token.start)
            )
        return token

    def parse(self):
        """Parse the document. Returns a ShaderDocument."""
        properties = []
        programs = {StageKind.vertex: [], StageKind.fragment: []}

        while True:
            token = self._next()
            if token.kind == TokenKind.property:
                properties.append(self._parse_property(token))
            elif token.kind == TokenKind.program:
                stage = self._parse_program(token)
                programs[stage.stage_kind].append(stage)
            elif token.kind == TokenKind.end_of_file:
                break
            else:
                raise ShaderSyntaxError(
                    f"Expected 'property' or 'program', found {token.text!r}.",
                    self._location(token.start),
                )

        end_location = self._location(len(self.source))
        stages = []
        for kind, label in [
            (StageKind.vertex, "vertex"),
            (StageKind.fragment, "fragment"),
        ]:
            found = programs[kind]
            if not found:
                raise MissingStageError(
                    f"The shader definition has no {label} stage (program {kind}).",
                    end_location,
                )
            elif len(found) > 1:
                raise MissingStageError(
                    f"The shader definition has more than one {label} stage (program {kind}).",
                    found[1].location,
                )
            stages.append(found[0])

        logger.debug(
            f"Parsed shader definition with {len(properties)} properties."
        )
        return ShaderDocument(self.source, properties, *stages)

    def _parse_property(self, keyword):
        name_token = self._expect(TokenKind.identifier, "a property name")
        self._expect(TokenKind.colon, "':'")
        type_token = self._expect(TokenKind.identifier, "a property type")
        if type_token.text not in PropertyType:
            options = ", ".join(PropertyType)
            raise ShaderSyntaxError(
                f"Unknown property type {type_token.text!r}, expected one of {options}.",
                self._location(type_token.start),
            )
        property_type = type_token.text

        default = None
        token = self._next()
        if token.kind == TokenKind.equals:
            default = self._parse_default(property_type)
            token = self._next()
        if token.kind != TokenKind.semicolon:
            found = repr(token.text) if token.text else "end of file"
            raise ShaderSyntaxError(
                f"Expected ';' after property {name_token.text!r}, found {found}.",
                self._location(token.start),
            )

        return PropertyDeclaration(
            name_token.text,
            property_type,
            default,
            self._location(name_token.start),
        )

    def _parse_default(self, property_type):
        components = PROPERTY_TYPES[property_type].components
        token = self._next()
        location = self._location(token.start)

        if token.kind == TokenKind.number:
            values = [float(token.text)]
            is_tuple = False
        elif token.kind == TokenKind.lparen:
            values = [float(self._expect(TokenKind.number, "a number").text)]
            while True:
                token = self._next()
                if token.kind == TokenKind.rparen:
                    break
                elif token.kind != TokenKind.comma:
                    raise ShaderSyntaxError(
                        "Expected ',' or ')' in default value.",
                        self._location(token.start),
                    )
                values.append(float(self._expect(TokenKind.number, "a number").text))
            is_tuple = True
        else:
            raise ShaderSyntaxError(
                "Expected a number or a tuple of numbers as default value.", location
            )

        if components == 0:
            raise ShaderSyntaxError(
                f"A {property_type} property cannot have a default value.", location
            )
        elif components == 1:
            if len(values) != 1:
                raise ShaderSyntaxError(
                    f"A {property_type} default must be a single number.", location
                )
            return values[0]
        elif not is_tuple or len(values) != components:
            raise ShaderSyntaxError(
                f"A {property_type} default must be a tuple of {components} numbers.",
                location,
            )
        return tuple(values)

    def _parse_program(self, keyword):
        name_token = self._expect(TokenKind.identifier, "a program name (vert or frag)")
        if name_token.text not in StageKind:
            raise ShaderSyntaxError(
                f"Unknown program {name_token.text!r}, expected 'vert' or 'frag'.",
                self._location(name_token.start),
            )
        literal = self._expect(TokenKind.program_literal, "'{'")
        body_start, body_end = literal.start + 1, literal.end - 1
        chunks, references, identifiers = tokenize_body(
            self.source, body_start, body_end
        )
        return StageDefinition(
            name_token.text,
            literal.text,
            chunks,
            references,
            identifiers,
            self._location(keyword.start),
        )


def parse_shader_definition(source):
    """Parse shader-definition text into a ShaderDocument.

    Raises ShaderSyntaxError for malformed text, and MissingStageError when
    the vertex or fragment stage is missing or duplicated.
    """
    return Parser(source).parse()


def load_shader_definition(filename):
    """Read a shader-definition file and parse it into a ShaderDocument."""
    with open(filename, "rb") as f:
        source = f.read().decode()
    return parse_shader_definition(source)
