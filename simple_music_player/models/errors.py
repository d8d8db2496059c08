"""Custom errors and exceptions."""


class SimpleMusicPlayerError(Exception):
    """Custom Exception for all errors."""

    error_code = 0


class SourceError(SimpleMusicPlayerError):
    """Error raised when the playback engine can not open or play a source."""

    error_code = 10


class StorageUnavailable(SimpleMusicPlayerError):
    """Error raised when the storage backing the media library is gone."""

    error_code = 11


class InvalidCommand(SimpleMusicPlayerError):
    """Error raised when an unknown command or invalid arguments are given."""

    error_code = 13
