"""
Resolve the intrinsic references in the stage bodies.

Each reference is classified into a uniform read (property or engine global),
a vertex attribute, a value crossing from the vertex to the fragment stage (an
interface slot), a stage builtin, or the final color sink. References that fit
none of these are an error. The result tells the code generator what text to
substitute for each reference, what to declare in each stage, and which
statements to comment out.
"""

import re

from ..utils import logger
from ..utils.enums import StageKind, SymbolKind
from .errors import (
    ShaderSyntaxError,
    UnresolvedReferenceError,
    TypeMismatchError,
    MissingOutputError,
)
from .symbols import SINK_NAME
from .types import interpolatable_types, value_types


VARYINGS_NAMESPACE = "vertex"
VARYINGS_INSTANCE = "vertex"  # the instance name of the interface block in GLSL
SINK_VARIABLE = "fragment_color"
SINK_TYPE = "vec4"

# Builtin fields of the varyings namespace: name -> (type, vertex text, fragment text)
builtin_varyings = {"position": ("vec4", "gl_Position", "gl_FragCoord")}

re_assignment = re.compile(r"(\.\w+)?\s*([-+*/%|&^]?=)(?!=)", re.UNICODE)
re_declaration_end = re.compile(r"\s*;")
re_out_declaration = re.compile(r"^\s*out\s+(\w+)\s+$", re.UNICODE)
re_in_declaration = re.compile(r"^\s*in\s+(\w+)\s+$", re.UNICODE)
re_local_declaration = re.compile(r"(\w+)\s+\w+\s*=\s*$", re.UNICODE)
re_constructor = re.compile(r"\s*(\w+)\s*\(", re.UNICODE)
re_single_symbol = re.compile(r"\s*@?([A-Za-z_]\w*)\s*", re.UNICODE)
re_new_statement = re.compile(r"\n\s*(void|out|in|uniform)\s", re.UNICODE)


class InterfaceSlot:
    """A value declared as output of the vertex stage and input of the fragment stage."""

    __slots__ = ["name", "type", "direction", "stage_kind"]

    def __init__(self, name, type, direction, stage_kind):
        set_ = object.__setattr__
        set_(self, "name", name)
        set_(self, "type", type)
        set_(self, "direction", direction)  # "out" or "in"
        set_(self, "stage_kind", stage_kind)

    def __setattr__(self, name, value):
        raise AttributeError("An InterfaceSlot cannot be modified.")

    def __delattr__(self, name):
        raise AttributeError("An InterfaceSlot cannot be modified.")

    def __eq__(self, other):
        if not isinstance(other, InterfaceSlot):
            return NotImplemented
        return (self.name, self.type, self.direction, self.stage_kind) == (
            other.name,
            other.type,
            other.direction,
            other.stage_kind,
        )

    def __hash__(self):
        return hash((self.name, self.type, self.direction, self.stage_kind))

    def __repr__(self):
        return f"<InterfaceSlot {self.direction} {self.type} {self.name} ({self.stage_kind})>"


class Resolution:
    """What an intrinsic reference resolved to.

    The kind is a SymbolKind value, the text is the concrete GLSL name that
    replaces the reference in the generated code.
    """

    __slots__ = ["kind", "reference", "symbol", "text"]

    def __init__(self, kind, reference, symbol, text):
        self.kind = kind
        self.reference = reference
        self.symbol = symbol
        self.text = text

    def __repr__(self):
        return f"<Resolution {self.reference.name} -> {self.kind} {self.text!r}>"


class ResolvedStage:
    """The resolve results for one stage."""

    def __init__(self, definition):
        self.definition = definition
        self.stage_kind = definition.stage_kind
        self.resolutions = {}  # IntrinsicReference -> Resolution
        self.used_globals = []
        self.used_attributes = []
        self.used_properties = []
        self.inputs = []  # InterfaceSlot
        self.outputs = []  # InterfaceSlot
        self.sink_writes = 0
        self.commented_spans = []  # (start, end, label) in body offsets

    def comment_out(self, start, end, label):
        self.commented_spans.append((start, end, label))
        self.commented_spans.sort()

    def text_for(self, reference):
        return self.resolutions[reference].text

    def use_symbol(self, symbol):
        if symbol.kind == SymbolKind.engine_global:
            target = self.used_globals
        elif symbol.kind == SymbolKind.attribute:
            target = self.used_attributes
        elif symbol.kind == SymbolKind.property:
            target = self.used_properties
        else:
            return
        if symbol.name not in target:
            target.append(symbol.name)


class ResolvedProgram:
    """The resolve results for both stages."""

    def __init__(self, symbols, vertex, fragment):
        self.symbols = symbols
        self.vertex = vertex
        self.fragment = fragment

    @property
    def stages(self):
        return (self.vertex, self.fragment)

    @property
    def interface_slots(self):
        return tuple(self.vertex.outputs) + tuple(self.fragment.inputs)

    @property
    def required_globals(self):
        names = set(self.vertex.used_globals) | set(self.fragment.used_globals)
        return frozenset(names)


class _ProducedField:
    """Bookkeeping for a field of the varyings that the vertex stage produces."""

    def __init__(self, name):
        self.name = name
        self.type = None
        self.type_location = None
        self.assignments = []  # IntrinsicReference
        self.declarations = []  # IntrinsicReference

    def set_type(self, type, reference):
        if self.type is None:
            self.type = type
            self.type_location = reference.location
        elif type != self.type:
            raise TypeMismatchError(
                f"Varying {reference.name!r} is assigned as {type}, but was "
                f"earlier given type {self.type} (at {self.type_location}).",
                reference.location,
                self.type_location,
            )


def _line_prefix(body, reference):
    line_start = body.rfind("\n", 0, reference.start) + 1
    return body[line_start : reference.start]


def _declaration_start(body, reference):
    prefix = _line_prefix(body, reference)
    return reference.start - len(prefix.lstrip())


def _statement_rhs(body, pos):
    end = body.find(";", pos)
    return body[pos:] if end < 0 else body[pos:end]


def _statement_end(body, pos):
    """Get the offset just past the ``;`` that ends the statement at pos, or -1.

    Comments are skipped. Running into a brace, or into a line that starts a
    new declaration, means that the semicolon is missing.
    """
    n = len(body)
    i = pos
    while i < n:
        c = body[i]
        if c == ";":
            return i + 1
        elif c in "{}":
            return -1
        elif body.startswith("//", i):
            end = body.find("\n", i)
            i = n if end < 0 else end
            continue
        elif body.startswith("/*", i):
            end = body.find("*/", i + 2)
            i = n if end < 0 else end + 2
            continue
        elif c == "\n" and re_new_statement.match(body, i):
            return -1
        i += 1
    return -1


class StageInterfaceResolver:
    """Resolve the references of both stages of a ShaderDocument.

    The vertex stage is resolved first, so that the fragment stage can check
    its reads of the varyings against what the vertex stage produces.
    """

    def __init__(self, document, symbols):
        self.document = document
        self.symbols = symbols
        self.produced = {}  # field name -> _ProducedField
        self.slot_types = {}  # field name -> type, in first-use order

    def resolve(self):
        vertex = self._resolve_vertex(self.document.vertex)
        fragment = self._resolve_fragment(self.document.fragment)
        self._drop_unused_outputs(vertex)

        # Both sides of the interface are built from the same slot list
        for name, type in self.slot_types.items():
            vertex.outputs.append(InterfaceSlot(name, type, "out", StageKind.vertex))
            fragment.inputs.append(InterfaceSlot(name, type, "in", StageKind.fragment))

        return ResolvedProgram(self.symbols, vertex, fragment)

    # ----- Shared

    def _resolve_symbol(self, stage, reference):
        """Resolve ``@name`` to a property, engine global or attribute."""
        symbol = self.symbols.lookup(reference.field, stage.stage_kind)
        if symbol is None:
            hint = ""
            if reference.field in self.symbols:
                hint = " Vertex attributes are only available in the vertex stage."
            elif reference.field == SINK_NAME:
                hint = " The final color can only be written in the fragment stage."
            raise UnresolvedReferenceError(
                f"Unresolved reference {reference.name!r}.{hint}",
                reference.location,
                reference.name,
            )
        stage.use_symbol(symbol)
        return Resolution(symbol.kind, reference, symbol, symbol.name)

    def _scan_identifiers(self, stage):
        # Engine globals and attributes can also be used by bare name
        for identifier in stage.definition.identifiers:
            symbol = self.symbols.lookup(identifier.name, stage.stage_kind)
            if symbol is not None:
                stage.use_symbol(symbol)

    def _unresolved(self, reference, reason):
        raise UnresolvedReferenceError(
            f"Unresolved reference {reference.name!r}: {reason}",
            reference.location,
            reference.name,
        )

    def _builtin(self, stage, reference):
        type, vertex_text, fragment_text = builtin_varyings[reference.field]
        text = vertex_text if stage.stage_kind == StageKind.vertex else fragment_text
        return Resolution(SymbolKind.builtin, reference, None, text)

    # ----- Vertex stage

    def _resolve_vertex(self, definition):
        stage = ResolvedStage(definition)
        body = definition.body_text

        for reference in definition.referenced_intrinsics:
            if reference.namespace == VARYINGS_NAMESPACE:
                if reference.field in builtin_varyings:
                    resolution = self._builtin(stage, reference)
                else:
                    self._process_vertex_output(stage, body, reference)
                    text = f"{VARYINGS_INSTANCE}.{reference.field}"
                    resolution = Resolution(SymbolKind.varying, reference, None, text)
            elif reference.namespace is None:
                resolution = self._resolve_symbol(stage, reference)
            else:
                self._unresolved(reference, "unknown namespace.")
            stage.resolutions[reference] = resolution

        self._scan_identifiers(stage)

        # Every produced varying must have a type that can cross the stage boundary
        for field in self.produced.values():
            reference = (field.declarations or field.assignments)[0]
            if field.type is None:
                raise TypeMismatchError(
                    f"Cannot determine the type of varying {reference.name!r}. Assign it "
                    f"with an explicit constructor, e.g. `{reference.name} = vec3(...);`, "
                    f"or declare it with `out vec3 {reference.name};`.",
                    reference.location,
                )
            elif field.type not in interpolatable_types:
                raise TypeMismatchError(
                    f"Varying {reference.name!r} has type {field.type}, which cannot be "
                    "passed from the vertex to the fragment stage.",
                    field.type_location,
                )

        return stage

    def _process_vertex_output(self, stage, body, reference):
        field = self.produced.get(reference.field, None)
        if field is None:
            field = _ProducedField(reference.field)

        # Detect declaration, e.g. "out vec3 @vertex.normal;"
        match = re_out_declaration.match(_line_prefix(body, reference))
        end_match = re_declaration_end.match(body, reference.end)
        if match and end_match:
            self.produced[reference.field] = field
            field.declarations.append(reference)
            field.set_type(match.group(1), reference)
            start = _declaration_start(body, reference)
            stage.comment_out(start, end_match.end(), "interface")
            return

        # Detect assignment, e.g. "@vertex.uv = vec2(...);"
        match = re_assignment.match(body, reference.end)
        if not match:
            self._unresolved(
                reference, "varyings can only be written in the vertex stage."
            )
        self.produced[reference.field] = field
        field.assignments.append(reference)
        attr, operator = match.group(1), match.group(2)
        if attr or operator != "=":
            return  # Does not tell us the type

        # Find type from the right hand side
        rhs = _statement_rhs(body, match.end())
        type = None
        constructor_match = re_constructor.match(rhs)
        if constructor_match and constructor_match.group(1) in value_types:
            type = constructor_match.group(1)
        else:
            symbol_match = re_single_symbol.fullmatch(rhs)
            if symbol_match:
                symbol = self.symbols.lookup(symbol_match.group(1), StageKind.vertex)
                if symbol is not None:
                    type = symbol.type
        if type is not None:
            field.set_type(type, reference)

    # ----- Fragment stage

    def _resolve_fragment(self, definition):
        stage = ResolvedStage(definition)
        body = definition.body_text

        for reference in definition.referenced_intrinsics:
            if reference.namespace == VARYINGS_NAMESPACE:
                if reference.field in builtin_varyings:
                    resolution = self._builtin(stage, reference)
                else:
                    self._process_fragment_input(stage, body, reference)
                    text = f"{VARYINGS_INSTANCE}.{reference.field}"
                    resolution = Resolution(SymbolKind.varying, reference, None, text)
            elif reference.namespace is None and reference.field == SINK_NAME:
                if re_assignment.match(body, reference.end):
                    stage.sink_writes += 1
                resolution = Resolution(SymbolKind.sink, reference, None, SINK_VARIABLE)
            elif reference.namespace is None:
                resolution = self._resolve_symbol(stage, reference)
            else:
                self._unresolved(reference, "unknown namespace.")
            stage.resolutions[reference] = resolution

        self._scan_identifiers(stage)

        if not stage.sink_writes:
            raise MissingOutputError(
                f"The fragment stage never writes the final color '@{SINK_NAME}'.",
                definition.location,
            )

        return stage

    def _process_fragment_input(self, stage, body, reference):
        prefix = _line_prefix(body, reference)
        ends_statement = re_declaration_end.match(body, reference.end)

        # Detect the consumer type
        consumer_type = None
        is_declaration = False
        match = re_in_declaration.match(prefix)
        if match and ends_statement:
            consumer_type = match.group(1)
            is_declaration = True
        elif ends_statement:
            match = re_local_declaration.search(prefix)
            if match and match.group(1) in value_types:
                consumer_type = match.group(1)

        if not is_declaration and re_assignment.match(body, reference.end):
            self._unresolved(
                reference, "varyings cannot be written in the fragment stage."
            )

        # A declaration alone does not compute a value
        field = self.produced.get(reference.field, None)
        if field is None or not field.assignments:
            self._unresolved(reference, "this varying is not set in the vertex stage.")

        if consumer_type is not None and consumer_type != field.type:
            raise TypeMismatchError(
                f"Varying {reference.name!r} is read as {consumer_type}, but the "
                f"vertex stage produces a {field.type} (at {field.type_location}).",
                reference.location,
                field.type_location,
            )

        if is_declaration:
            start = _declaration_start(body, reference)
            stage.comment_out(start, ends_statement.end(), "interface")

        self.slot_types.setdefault(reference.field, field.type)

    # ----- Cleanup

    def _drop_unused_outputs(self, stage):
        """Comment out the assignments of varyings that the fragment stage does not read."""
        body = stage.definition.body_text
        for name, field in self.produced.items():
            if name in self.slot_types:
                continue
            logger.debug(f"Varying {name!r} is not used in the fragment stage.")
            # Only the statement itself, it may share its line(s) with others
            for reference in field.assignments:
                end = _statement_end(body, reference.end)
                if end < 0:
                    raise ShaderSyntaxError(
                        f"Varying assignment of {reference.name!r} seems to be "
                        "missing a semicolon.",
                        reference.location,
                    )
                stage.comment_out(reference.start, end, "unused")


def resolve_program(document, symbols):
    """Resolve the intrinsic references of a ShaderDocument.

    Returns a ResolvedProgram. Raises UnresolvedReferenceError,
    TypeMismatchError or MissingOutputError.
    """
    return StageInterfaceResolver(document, symbols).resolve()
