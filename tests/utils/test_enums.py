from gfxmat.utils.enums import Enum, StageKind, PropertyType, SymbolKind, FailureReason
from pytest import raises


def test_enums():
    class MyOption(Enum):
        auto = "auto"  # fields map to str or int
        some_attr = "some-attr"
        foo = None  # value is the same as the key

    # Use dir() to get an (alphabetic) list of keys / options.
    assert dir(MyOption) == ["auto", "foo", "some_attr"]

    # Iterate over the object to get a list of values, in original order.
    assert list(MyOption) == ["auto", "some-attr", "foo"]

    # Attribute and map-like lookups are supported
    assert MyOption.some_attr == "some-attr"
    assert MyOption["some_attr"] == "some-attr"

    # Enums are 'immutable'
    with raises(RuntimeError):
        MyOption.auto = "foo"


def test_stage_kind():
    # The values are the names of the program blocks
    assert list(StageKind) == ["vert", "frag"]
    assert StageKind.vertex == "vert"
    assert StageKind.fragment == "frag"
    assert "vert" in StageKind
    assert "geom" not in StageKind


def test_property_type():
    assert list(PropertyType) == [
        "f32",
        "Vector2",
        "Vector3",
        "Vector4",
        "Color",
        "Texture2d",
    ]
    assert "Color" in PropertyType
    assert "color" not in PropertyType


def test_reasons_and_kinds():
    assert list(FailureReason) == [
        "syntax",
        "duplicate_symbol",
        "missing_stage",
        "unresolved_reference",
        "type_mismatch",
        "missing_output",
    ]
    assert SymbolKind.engine_global == "engine_global"
    assert len(list(SymbolKind)) == 6


if __name__ == "__main__":
    test_enums()
    test_stage_kind()
    test_property_type()
    test_reasons_and_kinds()
