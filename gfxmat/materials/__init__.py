"""
Material instances.

A material holds the values of the properties of a compiled program. Many
materials can share the same ProgramArtifact, each with their own values.
"""

# flake8: noqa

from ._material import Material
