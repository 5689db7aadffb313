from gfxmat.compiler.lexer import Lexer, TokenKind, tokenize_body
from gfxmat.compiler.errors import ShaderSyntaxError
from pytest import raises


def kinds(source):
    return [t.kind for t in Lexer(source)]


def test_lexer_property_tokens():
    assert kinds("property tint: Color = (1.0, 0.5);") == [
        TokenKind.property,
        TokenKind.identifier,
        TokenKind.colon,
        TokenKind.identifier,
        TokenKind.equals,
        TokenKind.lparen,
        TokenKind.number,
        TokenKind.comma,
        TokenKind.number,
        TokenKind.rparen,
        TokenKind.semicolon,
        TokenKind.end_of_file,
    ]


def test_lexer_numbers():
    texts = [t.text for t in Lexer("1 -2 3.5 .5 +1e3 2.5E-2")][:-1]
    assert texts == ["1", "-2", "3.5", ".5", "+1e3", "2.5E-2"]


def test_lexer_skips_comments():
    source = """
    // A line comment
    /* A block
       comment */ property
    """
    assert kinds(source) == [TokenKind.property, TokenKind.end_of_file]

    with raises(ShaderSyntaxError) as err:
        list(Lexer("property /* never closed"))
    assert "Unclosed comment" in err.value.message


def test_lexer_illegal_symbol():
    with raises(ShaderSyntaxError) as err:
        list(Lexer("property a # b"))
    assert err.value.location.line == 1
    assert err.value.location.column == 12
    assert "'#'" in err.value.message


def test_lexer_program_literal():
    tokens = list(Lexer("program vert { a { b } c } program"))
    assert [t.kind for t in tokens] == [
        TokenKind.program,
        TokenKind.identifier,
        TokenKind.program_literal,
        TokenKind.program,
        TokenKind.end_of_file,
    ]
    assert tokens[2].text == " a { b } c "
    assert (tokens[2].start, tokens[2].end) == (13, 26)


def test_lexer_program_literal_comments():
    # Braces in comments do not count
    source = "program vert { // }\n /* { */ x }"
    tokens = list(Lexer(source))
    assert tokens[2].kind == TokenKind.program_literal
    assert tokens[2].text == " // }\n /* { */ x "

    with raises(ShaderSyntaxError) as err:
        list(Lexer("program vert { void main() { }"))
    assert "Unclosed program block" in err.value.message
    assert err.value.location.column == 14


def test_tokenize_body_references():
    body = "@vertex.uv = vec2(vertex_uv); @color = x; // @nope\n"
    chunks, references, identifiers = tokenize_body(body, 0, len(body))

    assert [(r.namespace, r.field) for r in references] == [
        ("vertex", "uv"),
        (None, "color"),
    ]
    assert [r.name for r in references] == ["@vertex.uv", "@color"]
    assert [i.name for i in identifiers] == ["vec2", "vertex_uv", "x"]

    # The chunks form the body again
    text = "".join(c if isinstance(c, str) else c.name for c in chunks)
    assert text == body


def test_tokenize_body_members_and_comments():
    body = "@color.rgb = foo.bar; /* @vertex.x */ @vertex.uv.x;"
    chunks, references, identifiers = tokenize_body(body, 0, len(body))

    # Only the vertex namespace is recognized, the rest is a member access
    assert [r.name for r in references] == ["@color", "@vertex.uv"]
    assert references[0].end == len("@color")
    assert [i.name for i in identifiers] == ["foo"]


def test_tokenize_body_numbers_are_not_identifiers():
    body = "uint a = 2u; float b = 1.0e5;"
    _, _, identifiers = tokenize_body(body, 0, len(body))
    assert [i.name for i in identifiers] == ["uint", "a", "float", "b"]


def test_tokenize_body_locations():
    source = "program frag {\n  x = 1;\n  @color = y;\n}"
    start = source.index("{") + 1
    end = source.rindex("}")
    _, references, identifiers = tokenize_body(source, start, end)

    ref = references[0]
    assert ref.line == 2  # in the body
    assert (ref.location.line, ref.location.column) == (3, 3)
    assert ref.location.offset == source.index("@color")
    assert ref.location.source_line == "  @color = y;"

    assert identifiers[0].name == "x"
    assert (identifiers[0].location.line, identifiers[0].location.column) == (2, 3)


def test_tokenize_body_stray_at():
    for body in ["@ color = x;", "x = @1;", "x = @;"]:
        with raises(ShaderSyntaxError):
            tokenize_body(body, 0, len(body))


if __name__ == "__main__":
    test_lexer_property_tokens()
    test_lexer_numbers()
    test_lexer_skips_comments()
    test_lexer_illegal_symbol()
    test_lexer_program_literal()
    test_lexer_program_literal_comments()
    test_tokenize_body_references()
    test_tokenize_body_members_and_comments()
    test_tokenize_body_numbers_are_not_identifiers()
    test_tokenize_body_locations()
    test_tokenize_body_stray_at()
