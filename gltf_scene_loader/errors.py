#
# PROJECT: gltf-scene-loader
# MODULE: gltf_scene_loader/errors.py
# STATUS: Level 2 - Implementation
# LOG_REF: 2026-10-19
#


class LoadError(Exception):
    """Base class for every error raised while loading a document."""


class DocumentParseError(LoadError):
    """The document could not be parsed, or references data it does not contain."""


class LoadIOError(LoadError):
    """A file (the document or an external resource) could not be read."""

    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f"cannot read '{path}': {reason}")


class MissingAttributeError(LoadError):
    """A primitive is missing an attribute it cannot be rendered without."""

    def __init__(self, attribute, mesh_name=None, primitive_index=None):
        self.attribute = attribute
        self.mesh_name = mesh_name
        self.primitive_index = primitive_index
        where = f"mesh '{mesh_name}'" if mesh_name else "mesh"
        super().__init__(
            f"{where} primitive #{primitive_index} has no {attribute} attribute")


class TextureDecodeError(LoadError):
    """Referenced image bytes could not be decoded."""

    def __init__(self, texture_index, reason):
        self.texture_index = texture_index
        self.reason = reason
        super().__init__(f"cannot decode texture #{texture_index}: {reason}")


class BadModeError(Exception):
    """Geometry accessor called on a model drawn with a different mode.

    Not a ``LoadError``: it is raised by ``Model.triangles()``, ``lines()`` and
    ``points()`` after loading, and only concerns that one model.
    """

    def __init__(self, mode, expected):
        self.mode = mode
        self.expected = tuple(expected)
        names = ", ".join(m.name for m in self.expected)
        super().__init__(f"model is drawn as {mode.name}, expected one of: {names}")
