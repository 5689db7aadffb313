"""A very tiny CLI.

Invoke using e.g. ``python -m gfxmat version`` or
``python -m gfxmat compile shader.gfxmat``.
"""

import sys
import argparse

import gfxmat


def main(argv=None):
    # Get argv so we can massage it
    if argv is None:
        argv = sys.argv
    if argv and argv[0].endswith(".py"):
        argv = argv[1:]

    # Defaults and aliases
    if not argv:
        argv = ["help"]
    if argv == ["--version"]:
        argv = ["version"]

    # Let the rest to argparse

    parser = argparse.ArgumentParser(
        prog="gfxmat",
        description="The (very basic) gfxmat CLI",
    )

    parser.add_argument(
        "command",
        action="store",
        help="The command to run: 'help', 'version' or 'compile'",
    )
    parser.add_argument(
        "filename", action="store", nargs="?", help="The shader definition to compile"
    )
    parser.add_argument(
        "--stage",
        action="store",
        choices=list(gfxmat.StageKind),
        help="Only print the program text of this stage",
    )

    args = parser.parse_args(argv)
    command = args.command.lower()

    if command == "help":
        parser.print_help()
    elif command == "version":
        print("gfxmat v" + gfxmat.__version__)
    elif command == "compile":
        return _compile(args.filename, args.stage)
    else:
        print(f"Invalid command '{command}'", file=sys.stderr)
        return 1
    return 0


def _compile(filename, stage):
    if not filename:
        print("The compile command needs a filename.", file=sys.stderr)
        return 1
    try:
        artifact = gfxmat.ShaderCompiler().compile_file(filename)
    except gfxmat.ShaderCompileError as err:
        print(f"{filename}:{err}", file=sys.stderr)
        print(f"Compilation failed ({err.reason}).", file=sys.stderr)
        return 1
    except OSError as err:
        print(f"Cannot read {filename}: {err}", file=sys.stderr)
        return 1

    if stage:
        print(artifact.sources[stage], end="")
    else:
        for stage, source in artifact.sources.items():
            print(f"// ----- program {stage}")
            print(source)
    return 0


if __name__ == "__main__":
    sys.exit(main())
