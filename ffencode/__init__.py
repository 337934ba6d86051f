"""ffencode - ffmpeg encode action with binary acquisition and progress reporting."""

from ffencode.config import Settings, load_settings
from ffencode.encoder import execute, run
from ffencode.errors import AcquisitionError, EncodeError, ExecutionError, SpawnError
from ffencode.models import EncodeOptions, Job

__all__ = [
    "AcquisitionError",
    "EncodeError",
    "EncodeOptions",
    "ExecutionError",
    "Job",
    "Settings",
    "SpawnError",
    "execute",
    "load_settings",
    "run",
]
