"""Exceptions raised by the encode action."""


class EncodeError(Exception):
    """Base exception for encode operations."""

    pass


class AcquisitionError(EncodeError):
    """The ffmpeg binary could not be found or downloaded."""

    def __init__(self, url: str, cause=None):
        self.url = url
        self.cause = cause
        super().__init__(f"Unable to download file {url}: {cause}")


class SpawnError(EncodeError):
    """The ffmpeg process could not be started."""

    def __init__(self, binary: str, cause=None):
        self.binary = binary
        self.cause = cause
        super().__init__(f"Error starting ffmpeg process: {cause}")


class ExecutionError(EncodeError):
    """The ffmpeg process exited with a non-zero code."""

    def __init__(self, code: int):
        self.code = code
        super().__init__(f"Error in action-encode module (ffmpeg) code : {code}")
