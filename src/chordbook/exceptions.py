class ChordbookError(Exception):
    """Base exception for chordbook."""


class UnknownElementError(ChordbookError):
    """Raised when an editing operation targets an id that is not in the song."""

    def __init__(self, kind: str, element_id: str):
        self.kind = kind
        self.element_id = element_id
        super().__init__(f"No {kind} with id {element_id!r}")


class SongFileError(ChordbookError):
    """Raised when a song file cannot be read or written."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")
