"""Pytest configuration and fixtures."""

import pytest
from pathlib import Path
import tempfile
import shutil


WEBHOOK_URL = "https://discord.com/api/webhooks/123456789/s3cr3t-T0ken_value"


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test artifacts."""
    dirpath = tempfile.mkdtemp()
    yield Path(dirpath)
    shutil.rmtree(dirpath, ignore_errors=True)


@pytest.fixture
def webhook_url():
    return WEBHOOK_URL


@pytest.fixture
def probe_file_obj():
    """Host file object in ffprobe shape, as a transcode runner hands it over."""
    return {
        "file": "/media/tv/Show.Name.2020.S1E3.mkv",
        "file_size": 812.5,
        "duration": 2712,
        "ffProbeData": {
            "streams": [
                {"codec_type": "video", "codec_name": "hevc", "width": 1920, "height": 1080},
                {
                    "codec_type": "audio",
                    "codec_name": "eac3",
                    "channels": 6,
                    "tags": {"language": "eng"},
                    "disposition": {"default": 1, "comment": 0},
                },
                {
                    "codec_type": "audio",
                    "codec_name": "aac",
                    "channels": 2,
                    "tags": {"language": "jpn"},
                    "disposition": {"default": 0, "comment": 1},
                },
                {"codec_type": "subtitle", "codec_name": "subrip"},
            ]
        },
    }
