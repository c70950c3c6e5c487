"""
Exception hierarchy shared by the storage and notification layers.
"""


class QaboardError(Exception):
    """Base class for errors raised by qaboard backends."""


class StorageError(QaboardError):
    """The record store could not complete an operation."""


class StorageWriteError(StorageError):
    """A record could not be written. Nothing may be assumed to be stored."""


class StorageReadError(StorageError):
    """Records could not be read back from the store."""


class NotificationError(QaboardError):
    """A notification could not be handed to the pub/sub topic."""
