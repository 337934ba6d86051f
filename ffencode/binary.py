"""Locate or download the ffmpeg binary."""

import os
import sys
import logging

import requests

from ffencode.config import Settings
from ffencode.errors import AcquisitionError

logger = logging.getLogger(__name__)

ENV_OVERRIDE = "FFENCODE_FFMPEG"
CHUNK_SIZE = 64 * 1024


def binary_filename(version: str, platform: str = None) -> str:
    platform = platform or sys.platform
    return f"ffmpeg-{version}{'.exe' if platform == 'win32' else ''}"


def binary_url(settings: Settings, platform: str = None) -> str:
    return settings.download_url.format(
        version=settings.ffmpeg_version, platform=platform or sys.platform
    )


def _discard(path: str):
    if os.path.exists(path):
        os.remove(path)


def download_binary(url: str, output: str, settings: Settings) -> str:
    """
    Download ``url`` to ``output`` and mark it executable.

    Transfer progress is logged at every 10% step when the server reports a
    content length. No retries are attempted.

    Raises:
        AcquisitionError: On a non-success status or any stream/write failure
    """
    try:
        response = requests.get(url, stream=True, timeout=60)
    except requests.RequestException as e:
        raise AcquisitionError(url, e) from e

    with response:
        if not response.ok:
            raise AcquisitionError(url, f"HTTP {response.status_code}")

        total = int(response.headers.get("content-length") or 0)
        # Decoded size of a compressed body cannot be checked against its length
        exact_length = bool(total) and not response.headers.get("content-encoding")
        done = 0
        last_step = -1

        try:
            with open(output, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if not chunk:
                        continue
                    f.write(chunk)
                    done += len(chunk)
                    if total:
                        step = int(done / total * 10)
                        if step > last_step:
                            last_step = step
                            settings.logger.info(
                                f"> downloading ffmpeg: {done / total:.0%} - {done}/{total} bytes"
                            )
            if exact_length and done != total:
                raise AcquisitionError(url, f"incomplete download: {done}/{total} bytes")
            os.chmod(output, 0o755)
        except AcquisitionError:
            _discard(output)
            raise
        except (requests.RequestException, OSError) as e:
            _discard(output)
            raise AcquisitionError(url, e) from e

    return output


def resolve_binary(settings: Settings) -> str:
    """
    Return the path of the ffmpeg binary to run.

    Resolution order: the ``FFENCODE_FFMPEG`` override, a cached copy in the
    work path, and finally a fresh download into the work path.
    """
    version = settings.ffmpeg_version
    override = os.environ.get(ENV_OVERRIDE)

    if override and os.path.exists(override):
        settings.logger.info(f"> using external ffmpeg binary at: {override}")
        return override

    output = os.path.join(settings.workpath, binary_filename(version))
    if os.path.exists(output):
        settings.logger.info(f"> using an existing ffmpeg binary {version} at: {output}")
        return output

    url = binary_url(settings)
    settings.logger.info(f"> ffmpeg binary {version} is not found")
    settings.logger.info(f"> downloading a new ffmpeg binary {version} to: {output}")
    logger.debug(f"Downloading {url}")

    download_binary(url, output, settings)
    settings.logger.info(f"> ffmpeg binary {version} was successfully downloaded")
    return output
