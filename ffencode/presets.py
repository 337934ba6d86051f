"""Preset tables and ffmpeg argument construction."""

import os
from typing import Any, Dict, List

from ffencode.config import Settings
from ffencode.models import EncodeOptions, Job

GIF_FILTER = "[0:v] fps=12,scale=480:-1,split [a][b];[a] palettegen [p];[b][p] paletteuse"

# Default flags per output preset, in emission order
PRESETS: Dict[str, Dict[str, str]] = {
    "mp4": {
        "-acodec": "aac",
        "-ab": "128k",
        "-ar": "44100",
        "-vcodec": "libx264",
        "-r": "25",
        "-pix_fmt": "yuv420p",
    },
    "ogg": {
        "-acodec": "libvorbis",
        "-ab": "128k",
        "-ar": "44100",
        "-vcodec": "libtheora",
        "-r": "25",
    },
    "webm": {
        "-acodec": "libvorbis",
        "-ab": "128k",
        "-ar": "44100",
        "-vcodec": "libvpx",
        "-b": "614400",
        "-aspect": "16:9",
    },
    "mp3": {
        "-acodec": "libmp3lame",
        "-ab": "128k",
        "-ar": "44100",
    },
    "m4a": {
        "-acodec": "aac",
        "-ab": "64k",
        "-ar": "44100",
        "-strict": "-2",
    },
    "gif": {
        "-ss": "61.0",
        "-t": "2.5",
        "-filter_complex": GIF_FILTER,
    },
}


def list_presets() -> List[str]:
    """Return the names of the known presets."""
    return list(PRESETS)


def resolve_path(workpath: str, path: str) -> str:
    """Join a relative path with the job working directory."""
    if os.path.isabs(path):
        return path
    return os.path.join(workpath, path)


def merge_params(
    preset: str, input_path: str, output_path: str, params: Dict[str, Any] = None
) -> Dict[str, Any]:
    """
    Merge preset defaults, user overrides and the forced input/output flags.

    User overrides beat preset defaults. ``-i`` always stays first and ``-y``
    always comes last; neither can be overridden by ``params``. Unknown
    presets pass through with only the input and output flags.
    """
    merged: Dict[str, Any] = {"-i": input_path}
    merged.update(PRESETS.get(preset, {}))
    merged.update(params or {})
    merged["-i"] = input_path
    merged.pop("-y", None)
    merged["-y"] = output_path
    return merged


def flatten_params(params: Dict[str, Any]) -> List[str]:
    """Convert a flag mapping to a flat argument list."""
    args = []
    for flag, value in params.items():
        args.extend([str(flag), str(value)])
    return args


def build_params(job: Job, settings: Settings, options: EncodeOptions) -> List[str]:
    """Build the ffmpeg argument list for a job."""
    input_path = options.input or job.output
    if not input_path:
        raise ValueError(f"[{job.uid}] action-encode: no input file and job has no output")
    if not options.output:
        raise ValueError(f"[{job.uid}] action-encode: output file is required")

    input_path = resolve_path(job.workpath, input_path)
    output_path = resolve_path(job.workpath, options.output)

    settings.logger.info(f"[{job.uid}] action-encode: input file {input_path}")
    settings.logger.info(f"[{job.uid}] action-encode: output file {output_path}")

    return flatten_params(merge_params(options.preset, input_path, output_path, options.params))
