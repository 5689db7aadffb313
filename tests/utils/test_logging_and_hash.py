import hashlib
import logging

import gfxmat
from gfxmat.utils import logger, hash_from_value, assert_type
from pytest import raises


def test_logger():
    assert logger is gfxmat.logger
    assert logger.name == "gfxmat"
    assert logging.getLogger("gfxmat") is logger


def test_compile_logs_at_debug_level(caplog):
    source = """
    program vert { void main() { @vertex.position = vertex_position; } }
    program frag { void main() { @color = vec4(1.0); } }
    """
    with caplog.at_level(logging.DEBUG, logger="gfxmat"):
        artifact = gfxmat.compile_shader(source)
    assert "Compiling shader (" in caplog.text
    assert f"Compiled shader {artifact.hash[:12]}" in caplog.text
    assert caplog.text.index("Compiling shader") < caplog.text.index("Compiled shader")

    # Nothing is logged at the default level
    caplog.clear()
    with caplog.at_level(logging.WARNING, logger="gfxmat"):
        gfxmat.compile_shader(source)
    assert caplog.text == ""


def test_hash_from_value():
    value = ["void main() {}", [["tint", "Color", [1.0, 0.5, 0.5, 1.0]]]]
    expected = hashlib.sha1(
        b'["void main() {}",[["tint","Color",[1.0,0.5,0.5,1.0]]]]'
    ).hexdigest()
    assert hash_from_value(value) == expected

    # Tuples and lists encode the same
    assert hash_from_value(("a", 1)) == hash_from_value(["a", 1])
    assert hash_from_value(["a", 1]) != hash_from_value(["a", 2])


def test_assert_type():
    assert_type("x", 3, int)
    assert_type("x", None, None, int)
    with raises(TypeError) as err:
        assert_type("x", "3", int, float)
    assert "Expected 'x' to be an instance of int | float" in str(err.value)
