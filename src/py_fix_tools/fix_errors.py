"""
Exceptions raised by the toolkit.

Only DictionaryError is fatal. The others are caught by the beautifier and
turned into inline diagnostic text.
"""


class FixError(Exception):
    pass


class DictionaryError(FixError):
    """The protocol dictionary could not be read or is inconsistent."""


class FixParseError(FixError):
    """A raw message could not be split into header/body/trailer."""


class FieldMapError(FixError):
    """A repeating group could not be retrieved from a field map."""


class GroupTemplateError(FixError):
    """No group-count definition was found for a tag."""


class SessionTimeout(FixError, TimeoutError):
    pass
