"""
This directory contains the GLSL templates used by the code generator. They
are loaded via the jinja2 environment in ``templating.py``.
"""
