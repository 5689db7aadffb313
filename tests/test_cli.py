import gfxmat
from gfxmat.__main__ import main


SOURCE = """
property tint: Color = (1.0, 0.5, 0.5, 1.0);

program vert {
    void main() {
        @vertex.position = model_view_projection * vertex_position;
    }
}

program frag {
    void main() {
        @color = tint;
    }
}
"""


def test_cli_version(capsys):
    assert main(["version"]) == 0
    assert capsys.readouterr().out.strip() == "gfxmat v" + gfxmat.__version__

    assert main(["--version"]) == 0
    assert gfxmat.__version__ in capsys.readouterr().out


def test_cli_help(capsys):
    assert main([]) == 0
    assert "compile" in capsys.readouterr().out


def test_cli_invalid_command(capsys):
    assert main(["foo"]) == 1
    assert "Invalid command 'foo'" in capsys.readouterr().err


def test_cli_compile(tmp_path, capsys):
    filename = tmp_path / "tint.gfxmat"
    filename.write_text(SOURCE, encoding="utf-8")

    assert main(["compile", str(filename)]) == 0
    out = capsys.readouterr().out
    assert out.index("// ----- program vert") < out.index("// ----- program frag")
    assert out.count("#version 330 core") == 2
    assert "gl_Position = model_view_projection * vertex_position;" in out
    assert "fragment_color = tint;" in out

    assert main(["compile", str(filename), "--stage", "frag"]) == 0
    out = capsys.readouterr().out
    assert out == gfxmat.compile_shader(SOURCE).fragment_source


def test_cli_compile_errors(tmp_path, capsys):
    filename = tmp_path / "broken.gfxmat"
    filename.write_text(SOURCE.replace("@color", "vec4 c"), encoding="utf-8")

    assert main(["compile", str(filename)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "never writes the final color" in captured.err
    assert "Compilation failed (missing_output)" in captured.err

    assert main(["compile", str(tmp_path / "missing.gfxmat")]) == 1
    assert "Cannot read" in capsys.readouterr().err

    assert main(["compile"]) == 1
    assert "needs a filename" in capsys.readouterr().err
