"""Exceptions raised by isoml."""


class IsomlError(Exception):
    """Base class for all isoml errors."""


class TreeNotGrownError(IsomlError, RuntimeError):
    """The tree is bare: grow() has not been called yet."""


class TreeAlreadyGrownError(IsomlError, RuntimeError):
    """grow() was called on a tree that has already been grown."""


class NotTrainedError(IsomlError, RuntimeError):
    """An estimator was used before it was fitted."""


class SchemaMismatchError(IsomlError, ValueError):
    """A sample does not match the column layout seen during training."""
