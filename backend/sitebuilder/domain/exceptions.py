# sitebuilder/domain/exceptions.py
"""
Error taxonomy for the content block subsystem.

Each error carries the HTTP status the API layer answers with; the
handlers in ``sitebuilder.errors`` read it from ``status_code``.
"""


class CmsError(Exception):
    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__name__)


class PageNotFound(CmsError):
    status_code = 404


class BlockNotFound(CmsError):
    status_code = 404


class AccessDenied(CmsError):
    """The caller's tenant does not own the page being touched."""

    status_code = 403


class InvalidBlockType(CmsError):
    status_code = 400


class UnknownBlockType(InvalidBlockType):
    """Raised by the renderer when asked to render an unregistered tag."""


class BlockRenderError(CmsError):
    """A single block could not be rendered (bad payload, bad video URL)."""


class PersistenceFailure(CmsError):
    """A storage write failed; the enclosing mutation was rolled back."""


class EditConflict(CmsError):
    """The block changed after the editor loaded it."""

    status_code = 409


class InvalidPrecondition(CmsError):
    status_code = 400
