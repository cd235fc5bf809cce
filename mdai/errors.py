"""Exceptions raised by mdai outside the quote extractor."""


class MdaiError(Exception):
    """Base class for errors reported to the CLI user."""


class ConfigError(MdaiError):
    pass


class DocumentError(MdaiError):
    pass


class OperationError(MdaiError):
    pass


class CompletionError(MdaiError):
    """The completion API answered without any choices."""
