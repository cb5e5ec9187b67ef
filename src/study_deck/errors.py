"""Exceptions raised by the study deck core."""


class StudyDeckError(Exception):
    """Base class for study deck errors."""


class CatalogMissingError(StudyDeckError):
    """The syllabus catalog could not be found or is unusable."""


class StateCorruptedError(StudyDeckError):
    """A persisted state blob failed the structural check."""


class StorageWriteError(StudyDeckError):
    """Writing the state blob to the local store failed."""


class StorageReadError(StudyDeckError):
    """The local store could not be opened or read."""
