"""Configuration module for ffencode."""

import json
import os
import logging
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_FFMPEG_VERSION = "b4.4"
DEFAULT_DOWNLOAD_URL = (
    "https://github.com/eugeneware/ffmpeg-static/releases/download/{version}/{platform}-x64"
)


@dataclass
class Settings:
    """Execution context for one encode invocation."""

    workpath: str
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("ffencode"))
    debug: bool = False
    ffmpeg_version: str = DEFAULT_FFMPEG_VERSION
    download_url: str = DEFAULT_DOWNLOAD_URL  # Template with {version} and {platform}
    log_level: str = "INFO"  # Application log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)


def load_settings(
    config_path: Optional[str] = None,
    logger: Optional[logging.Logger] = None,
    workpath: Optional[str] = None,
) -> Settings:
    """
    Load settings from a JSON file, falling back to defaults.

    An explicit ``workpath`` wins over FFENCODE_WORKPATH and the file. Only
    the work path that is finally chosen gets created.
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", "./config/ffencode.json")

    default_config = {
        "workpath": os.path.join(os.path.expanduser("~"), ".ffencode"),
        "debug": False,
        "ffmpeg_version": DEFAULT_FFMPEG_VERSION,
        "download_url": DEFAULT_DOWNLOAD_URL,
        "log_level": "INFO",
    }

    if not os.path.exists(config_path):
        logging.warning(
            f"Config file not found at {config_path}, using default configuration"
        )
        config_data = default_config
    else:
        with open(config_path, "r") as f:
            config_data = json.load(f)

    workpath = workpath or os.environ.get(
        "FFENCODE_WORKPATH", config_data.get("workpath", default_config["workpath"])
    )
    os.makedirs(workpath, exist_ok=True)

    return Settings(
        workpath=workpath,
        logger=logger or logging.getLogger("ffencode"),
        debug=config_data.get("debug", False),
        ffmpeg_version=config_data.get("ffmpeg_version", DEFAULT_FFMPEG_VERSION),
        download_url=config_data.get("download_url", DEFAULT_DOWNLOAD_URL),
        log_level=config_data.get("log_level", "INFO"),
    )
