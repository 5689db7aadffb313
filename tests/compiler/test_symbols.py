from gfxmat import SymbolKind, StageKind
from gfxmat.utils import ReadOnlyDict
from gfxmat.compiler import (
    ENGINE_GLOBALS,
    VERTEX_ATTRIBUTES,
    EngineGlobal,
    SymbolTable,
    PropertyDeclaration,
    SourceLocation,
    DuplicateSymbolError,
    parse_shader_definition,
)
from gfxmat.compiler.symbols import build_symbol_table
from pytest import raises


def test_engine_globals_table():
    assert list(ENGINE_GLOBALS) == [
        "model_transform",
        "view_transform",
        "model_view_transform",
        "projection_transform",
        "model_view_projection",
        "normal_transform",
        "view_normal_transform",
        "camera_position",
        "light_position",
        "light_strength",
        "light_radius",
        "light_color",
        "global_ambient",
    ]
    assert ENGINE_GLOBALS["global_ambient"] == EngineGlobal(
        "global_ambient", "vec4", "ambient"
    )
    assert ENGINE_GLOBALS["normal_transform"].type == "mat3"
    assert ENGINE_GLOBALS["light_strength"].type == "float"

    # Shared, so it must not be modified
    with raises(TypeError):
        ENGINE_GLOBALS["foo"] = EngineGlobal("foo", "float", "custom")
    with raises(TypeError):
        del ENGINE_GLOBALS["global_ambient"]


def test_vertex_attributes_table():
    assert [(a.name, a.type, a.location) for a in VERTEX_ATTRIBUTES.values()] == [
        ("vertex_position", "vec4", 0),
        ("vertex_normal", "vec3", 1),
        ("vertex_uv", "vec2", 2),
    ]


def test_symbol_table_lookup():
    table = SymbolTable()
    assert table.engine_globals is ENGINE_GLOBALS
    assert len(table) == len(ENGINE_GLOBALS)

    symbol = table.lookup("light_color")
    assert symbol.kind == SymbolKind.engine_global
    assert symbol.type == "vec4"
    assert symbol.declaration is ENGINE_GLOBALS["light_color"]

    # Attributes only exist in the vertex stage
    assert table.lookup("vertex_uv") is None
    assert table.lookup("vertex_uv", StageKind.fragment) is None
    symbol = table.lookup("vertex_uv", StageKind.vertex)
    assert symbol.kind == SymbolKind.attribute
    assert symbol.type == "vec2"
    assert "vertex_uv" in table

    assert table.lookup("foo") is None
    assert "foo" not in table


def test_symbol_table_properties():
    table = SymbolTable()
    a = PropertyDeclaration("a", "f32", 1.0)
    b = PropertyDeclaration("b", "Texture2d")
    table.declare_property(b)
    table.declare_property(a)

    # Declaration order is kept
    assert table.properties == (b, a)
    assert len(table) == len(ENGINE_GLOBALS) + 2

    symbol = table.lookup("b", StageKind.fragment)
    assert symbol.kind == SymbolKind.property
    assert symbol.type == "sampler2D"
    assert symbol.declaration is b


def test_symbol_table_duplicate_property():
    loc1 = SourceLocation(9, 1, 10)
    loc2 = SourceLocation(30, 2, 10)
    table = SymbolTable()
    first = PropertyDeclaration("tint", "Color", None, loc1)
    table.declare_property(first)

    with raises(DuplicateSymbolError) as err:
        table.declare_property(PropertyDeclaration("tint", "f32", None, loc2))
    assert err.value.location is loc2
    assert err.value.conflict is first
    assert err.value.conflict_location is loc1
    assert "already declared at 1:10" in err.value.message


def test_symbol_table_shadows_global():
    table = SymbolTable()
    loc = SourceLocation(9, 1, 10)
    for name in ENGINE_GLOBALS:
        with raises(DuplicateSymbolError) as err:
            table.declare_property(PropertyDeclaration(name, "f32", None, loc))
        assert err.value.conflict is ENGINE_GLOBALS[name]
        assert err.value.conflict_location is None
        assert "engine global" in err.value.message


def test_symbol_table_shadows_attribute():
    table = SymbolTable()
    with raises(DuplicateSymbolError) as err:
        table.declare_property(PropertyDeclaration("vertex_uv", "Vector2"))
    assert err.value.conflict is VERTEX_ATTRIBUTES["vertex_uv"]
    assert err.value.conflict_location is None
    assert "vertex attribute" in err.value.message


def test_symbol_table_reserves_final_color():
    table = SymbolTable()
    loc = SourceLocation(9, 1, 10)
    with raises(DuplicateSymbolError) as err:
        table.declare_property(PropertyDeclaration("color", "Color", None, loc))
    assert err.value.location is loc
    assert err.value.conflict is None
    assert err.value.conflict_location is None
    assert "final color" in err.value.message
    assert table.properties == ()
    assert table.lookup("color") is None


def test_symbol_table_custom_globals():
    custom = ReadOnlyDict(time=EngineGlobal("time", "float", "clock"))
    table = SymbolTable(custom)
    assert table.lookup("time").type == "float"
    assert table.lookup("global_ambient") is None

    # A name that is a global elsewhere is fine here
    table.declare_property(PropertyDeclaration("global_ambient", "Color"))


def test_build_symbol_table():
    doc = parse_shader_definition(
        """
        property tint: Color;
        property tint: Vector4;
        program vert { void main() { @vertex.position = vertex_position; } }
        program frag { void main() { @color = tint; } }
        """
    )
    with raises(DuplicateSymbolError) as err:
        build_symbol_table(doc)
    assert err.value.location.line == 3
    assert err.value.conflict_location.line == 2
