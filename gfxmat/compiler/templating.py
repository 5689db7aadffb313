import jinja2


root_loader = jinja2.PrefixLoader(
    {"gfxmat": jinja2.PackageLoader("gfxmat.compiler.glsl", ".")}, delimiter="."
)

jinja_env = jinja2.Environment(
    block_start_string="{$",
    block_end_string="$}",
    variable_start_string="{{",
    variable_end_string="}}",
    line_statement_prefix="$$",
    undefined=jinja2.StrictUndefined,
    loader=root_loader,
)


def render_template(name, **kwargs):
    """Render a GLSL template, e.g. 'gfxmat.stage.glsl', with the given variables."""
    t = jinja_env.get_template(name)
    try:
        return t.render(**kwargs)
    except jinja2.UndefinedError as err:
        raise ValueError(f"Cannot generate shader: {err.args[0]}") from None
