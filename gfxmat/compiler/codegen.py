"""
Generate the GLSL program text for each stage: a header with the version
marker and all uniform, attribute and interface declarations, followed by the
stage body with the intrinsic references replaced by concrete names.
"""

import textwrap

from ..utils.enums import StageKind
from .resolve import VARYINGS_INSTANCE, SINK_VARIABLE, SINK_TYPE
from .symbols import VERTEX_ATTRIBUTES
from .templating import render_template
from .types import format_glsl_value, flat_types


VARYINGS_BLOCK_NAME = "Varyings"


def _body_text(text, depth):
    # Block comments do not nest
    if depth > 0:
        return text.replace("*/", "* /")
    return text


def rewrite_body(stage):
    """Get the body text of a ResolvedStage with its references substituted
    and its commented spans wrapped in block comments.
    """
    body = stage.definition.body_text

    # Edits on the original body: (start, order, end, text). At the same
    # offset a comment is closed before the next one opens.
    edits = []
    for start, end, label in stage.commented_spans:
        edits.append((start, 1, start, f"/* {label}: "))
        edits.append((end, 0, end, " */"))
    for chunk in stage.definition.chunks:
        if not isinstance(chunk, str):
            edits.append((chunk.start, 2, chunk.end, stage.text_for(chunk)))
    edits.sort()

    parts = []
    pos = 0
    depth = 0
    for start, order, end, text in edits:
        parts.append(_body_text(body[pos:start], depth))
        parts.append(text)
        if order == 0:
            depth -= 1
        elif order == 1:
            depth += 1
        pos = end
    parts.append(_body_text(body[pos:], depth))
    lines = "".join(parts).split("\n")

    # Strip empty lines at the start and end
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop(-1)

    return textwrap.dedent("\n".join(lines))


def _slot_vars(slot):
    qualifier = "flat " if slot.type in flat_types else ""
    return {"name": slot.name, "type": slot.type, "qualifier": qualifier}


def _property_vars(prop):
    initializer = ""
    if prop.default is not None:
        initializer = " = " + format_glsl_value(prop.glsl_type, prop.default)
    return {"name": prop.name, "glsl_type": prop.glsl_type, "initializer": initializer}


def generate_stage_source(stage, program, version):
    """Generate the GLSL for one ResolvedStage of a ResolvedProgram."""
    symbols = program.symbols
    is_vertex = stage.stage_kind == StageKind.vertex

    # Declarations are in table order, not in order of use, so that the
    # result only depends on what is used.
    engine_globals = [
        g for name, g in symbols.engine_globals.items() if name in stage.used_globals
    ]
    attributes = []
    if is_vertex:
        attributes = [
            a for name, a in VERTEX_ATTRIBUTES.items() if name in stage.used_attributes
        ]

    slots = stage.outputs if is_vertex else stage.inputs
    code = render_template(
        "gfxmat.stage.glsl",
        version=version,
        properties=[_property_vars(prop) for prop in symbols.properties],
        globals=engine_globals,
        attributes=attributes,
        direction="out" if is_vertex else "in",
        block_name=VARYINGS_BLOCK_NAME,
        instance_name=VARYINGS_INSTANCE,
        slots=[_slot_vars(slot) for slot in slots],
        sink=None if is_vertex else {"type": SINK_TYPE, "name": SINK_VARIABLE},
        body=rewrite_body(stage),
    )
    return code.rstrip() + "\n"


def generate_program_sources(program, version):
    """Generate the (vertex_source, fragment_source) of a ResolvedProgram."""
    return (
        generate_stage_source(program.vertex, program, version),
        generate_stage_source(program.fragment, program, version),
    )
