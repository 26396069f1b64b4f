"""Tests for configuration loading."""

import json

import pytest

from img_thumbnailer.core.config import load_config
from img_thumbnailer.core.exceptions import ConfigurationError


def write_config(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


class TestLoadConfig:
    """Tests for load_config."""

    def test_minimal_config(self, tmp_path):
        """port, bucket and region are enough."""
        path = write_config(
            tmp_path / "server.conf",
            {"port": 8080, "bucket": "thumbnails", "region": "eu-west-1"},
        )

        config = load_config(path)

        assert config.port == 8080
        assert config.bucket == "thumbnails"
        assert config.region == "eu-west-1"
        assert config.credentials_profile == "thumbnailer"

    def test_optional_settings(self, tmp_path):
        """Optional settings override the defaults."""
        path = write_config(
            tmp_path / "server.conf",
            {
                "port": 9000,
                "bucket": "b",
                "region": "us-east-1",
                "host": "127.0.0.1",
                "credentials_profile": "uploader",
                "credentials_file": "/etc/aws/credentials",
                "fetch_timeout": 5,
                "scratch_dir": "/var/tmp",
                "debug": True,
            },
        )

        config = load_config(path)

        assert config.host == "127.0.0.1"
        assert config.credentials_profile == "uploader"
        assert config.credentials_file == "/etc/aws/credentials"
        assert config.fetch_timeout == 5.0
        assert config.scratch_dir == "/var/tmp"
        assert config.debug is True

    def test_missing_file(self, tmp_path):
        """A missing file is a ConfigurationError naming the path."""
        path = str(tmp_path / "nope.conf")

        with pytest.raises(ConfigurationError, match="cannot read configuration file") as excinfo:
            load_config(path)

        assert path in str(excinfo.value)

    def test_not_json(self, tmp_path):
        """A file that is not JSON is invalid."""
        path = tmp_path / "server.conf"
        path.write_text("port = 8080\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="invalid configuration"):
            load_config(str(path))

    @pytest.mark.parametrize(
        "data",
        [
            {"bucket": "b", "region": "r"},
            {"port": 8080, "region": "r"},
            {"port": 8080, "bucket": "b"},
            {"port": "http", "bucket": "b", "region": "r"},
            {"port": 0, "bucket": "b", "region": "r"},
        ],
    )
    def test_invalid_settings(self, tmp_path, data):
        """Missing or malformed settings are rejected."""
        path = write_config(tmp_path / "server.conf", data)

        with pytest.raises(ConfigurationError, match="invalid configuration"):
            load_config(path)
