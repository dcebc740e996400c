"""Errors raised while customizing a template archive."""


class TemplateError(Exception):
    """Base class for template generation failures."""

    kind = "TemplateError"


class TemplateDecodeError(TemplateError):
    """The template archive bytes could not be decoded."""

    kind = "DecodeError"


class RootNotFoundError(TemplateError):
    """No root folder could be determined inside the template archive."""

    kind = "RootNotFound"
