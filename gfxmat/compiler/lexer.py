"""
Tokenization of shader-definition documents.

At the top level a document consists of keywords, identifiers, numbers, a few
symbols, and program literals (the brace-delimited stage bodies). The body of a
program literal is kept verbatim, but it is also split into chunks of plain
text and intrinsic references (``@field`` or ``@namespace.field``), so that the
references can be rewritten later without parsing the body again.
"""

import re

from ..utils.enums import Enum
from .errors import SourceLocation, ShaderSyntaxError


class TokenKind(Enum):
    """The kinds of tokens at the top level of a shader definition."""

    property = None
    program = None
    identifier = None
    number = None
    colon = None
    semicolon = None
    equals = None
    lparen = None
    rparen = None
    comma = None
    program_literal = None
    end_of_file = None


KEYWORDS = {"property": TokenKind.property, "program": TokenKind.program}

SYMBOLS = {
    ":": TokenKind.colon,
    ";": TokenKind.semicolon,
    "=": TokenKind.equals,
    "(": TokenKind.lparen,
    ")": TokenKind.rparen,
    ",": TokenKind.comma,
}

# The namespaces that an intrinsic reference can be qualified with
NAMESPACES = ("vertex",)

re_skip = re.compile(r"(?:\s+|//[^\n]*|/\*.*?\*/)+", re.DOTALL)
re_identifier = re.compile(r"[A-Za-z_]\w*", re.UNICODE)
re_number = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

re_body_token = re.compile(
    r"(?P<comment>//[^\n]*|/\*.*?(?:\*/|\Z))"
    r"|@(?P<reference>[A-Za-z_]\w*)"
    r"|(?P<at>@)"
    r"|(?P<number>\d+\.?\d*(?:[eE][-+]?\d+)?\w*|\.\d+(?:[eE][-+]?\d+)?\w*)"
    r"|(?P<member>\.\s*[A-Za-z_]\w*)"
    r"|(?P<identifier>[A-Za-z_]\w*)",
    re.DOTALL | re.UNICODE,
)
re_namespace_field = re.compile(r"\.([A-Za-z_]\w*)", re.UNICODE)


class Token:
    """A token, with its span in the source document."""

    __slots__ = ["kind", "text", "start", "end"]

    def __init__(self, kind, text, start, end):
        self.kind = kind
        self.text = text
        self.start = start
        self.end = end

    def __repr__(self):
        return f"<Token {self.kind} {self.text!r} at {self.start}>"


class IntrinsicReference:
    """An occurrence of ``@field`` or ``@namespace.field`` in a stage body.

    The ``start`` and ``end`` are relative to the body text, ``line`` is the
    0-based line index in the body, and ``location`` is the location in the
    original document.
    """

    __slots__ = ["namespace", "field", "start", "end", "line", "location"]

    def __init__(self, namespace, field, start, end, line, location):
        self.namespace = namespace
        self.field = field
        self.start = start
        self.end = end
        self.line = line
        self.location = location

    @property
    def name(self):
        """The reference as written, e.g. '@vertex.uv'."""
        if self.namespace:
            return f"@{self.namespace}.{self.field}"
        return f"@{self.field}"

    def __repr__(self):
        return f"<IntrinsicReference {self.name} at {self.location}>"


class BodyIdentifier:
    """A bare identifier in a stage body (outside comments, not a member access)."""

    __slots__ = ["name", "start", "location"]

    def __init__(self, name, start, location):
        self.name = name
        self.start = start
        self.location = location

    def __repr__(self):
        return f"<BodyIdentifier {self.name} at {self.location}>"


class Lexer:
    """Produce the top-level tokens of a shader definition."""

    def __init__(self, source):
        if not isinstance(source, str):
            raise TypeError("Shader definition source must be a str.")
        self.source = source
        self._pos = 0
        self._done = False

    def location(self, offset):
        return SourceLocation.from_offset(self.source, offset)

    def __iter__(self):
        while not self._done:
            yield self.next()

    def next(self):
        """Get the next token. At the end, an end_of_file token is returned."""
        source = self.source
        self._skip_whitespace_and_comments()
        start = self._pos

        if start >= len(source):
            self._done = True
            return Token(TokenKind.end_of_file, "", start, start)

        character = source[start]

        match = re_identifier.match(source, start)
        if match:
            word = match.group(0)
            self._pos = match.end()
            kind = KEYWORDS.get(word, TokenKind.identifier)
            return Token(kind, word, start, self._pos)

        match = re_number.match(source, start)
        if match:
            self._pos = match.end()
            return Token(TokenKind.number, match.group(0), start, self._pos)

        if character == "{":
            return self._program_literal(start)

        if character in SYMBOLS:
            self._pos = start + 1
            return Token(SYMBOLS[character], character, start, self._pos)

        self._done = True
        raise ShaderSyntaxError(
            f"Illegal symbol {character!r}.", self.location(start)
        )

    def _skip_whitespace_and_comments(self):
        source = self.source
        match = re_skip.match(source, self._pos)
        if match:
            self._pos = match.end()
        if source.startswith("/*", self._pos):
            self._done = True
            raise ShaderSyntaxError("Unclosed comment.", self.location(self._pos))

    def _program_literal(self, start):
        # Find the matching closing brace, skipping over comments in the body
        source = self.source
        depth = 0
        i = start
        n = len(source)
        while i < n:
            c = source[i]
            if c == "/" and source.startswith("//", i):
                nl = source.find("\n", i)
                i = n if nl < 0 else nl
                continue
            elif c == "/" and source.startswith("/*", i):
                end = source.find("*/", i + 2)
                i = n if end < 0 else end + 2
                continue
            elif c == "{":
                depth += 1
            elif c == "}":
                depth -= 1
                if depth == 0:
                    self._pos = i + 1
                    return Token(
                        TokenKind.program_literal, source[start + 1 : i], start, i + 1
                    )
            i += 1

        self._done = True
        raise ShaderSyntaxError(
            "Unclosed program block, missing '}'.", self.location(start)
        )


def tokenize_body(source, body_start, body_end):
    """Split a stage body into chunks of text and intrinsic references.

    Returns (chunks, references, identifiers). The chunks are str and
    IntrinsicReference objects that, when the references are written back as
    text, form the body again.
    """
    body = source[body_start:body_end]
    chunks = []
    references = []
    identifiers = []
    text_start = 0

    for match in re_body_token.finditer(body):
        kind = match.lastgroup
        if kind == "reference":
            start = match.start()
            namespace, field = None, match.group("reference")
            end = match.end()
            if field in NAMESPACES:
                sub = re_namespace_field.match(body, end)
                if sub:
                    namespace, field = field, sub.group(1)
                    end = sub.end()
            location = SourceLocation.from_offset(source, body_start + start)
            line = body.count("\n", 0, start)
            ref = IntrinsicReference(namespace, field, start, end, line, location)
            if start > text_start:
                chunks.append(body[text_start:start])
            chunks.append(ref)
            references.append(ref)
            text_start = end
        elif kind == "at":
            raise ShaderSyntaxError(
                "Expected an identifier after '@'.",
                SourceLocation.from_offset(source, body_start + match.start()),
            )
        elif kind == "identifier":
            start = match.start()
            if start < text_start:
                continue  # part of a namespaced reference
            location = SourceLocation.from_offset(source, body_start + start)
            identifiers.append(BodyIdentifier(match.group(0), start, location))

    if text_start < len(body):
        chunks.append(body[text_start:])

    return chunks, references, identifiers
