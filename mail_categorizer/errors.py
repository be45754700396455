"""Exception types raised at the collaborator seams."""

from __future__ import annotations


class MailCategorizerError(Exception):
    """Base class for categorizer failures."""


class BodyRetrievalError(MailCategorizerError):
    """The host could not return the plain-text body of a message."""


class CategoryApplyError(MailCategorizerError):
    """The host could not persist a category assignment."""


class FolderLoadError(MailCategorizerError):
    """The host could not enumerate its folders."""


class MessageListError(MailCategorizerError):
    """The host could not enumerate the messages of a folder."""


class ConfigParseError(MailCategorizerError, ValueError):
    """A weight value could not be read as a usable number."""


class CategoryValidationError(MailCategorizerError, ValueError):
    """Category name or keyword input is unusable."""
