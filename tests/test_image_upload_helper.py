"""
Tests for the image hosting backends
"""
import pytest
import cloudinary.exceptions
from unittest.mock import patch

from helpers.image_upload_helper import CloudinaryImageHost, ImageHost, LocalImageHost
from utils.exceptions import ImageUploadError, UpstreamFailure

IMAGE = b"\x89PNG\r\n\x1a\nfake-png"
SECURE_URL = "https://res.cloudinary.com/demo/image/upload/x.png"


class TestImageHost:
    """The base class is an interface only."""

    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            ImageHost()


@patch("helpers.image_upload_helper.cloudinary.config")
class TestCloudinaryImageHost:
    """Uploads through the Cloudinary SDK."""

    def make_host(self, **overrides):
        kwargs = dict(cloud_name="demo", api_key="1234", api_secret="abcd", timeout=5)
        kwargs.update(overrides)
        return CloudinaryImageHost(**kwargs)

    def test_configures_sdk(self, mock_config):
        self.make_host()
        mock_config.assert_called_once_with(
            cloud_name="demo", api_key="1234", api_secret="abcd", secure=True
        )

    @patch("helpers.image_upload_helper.cloudinary.uploader.upload")
    def test_upload_returns_secure_url(self, mock_upload, _mock_config):
        mock_upload.return_value = {"secure_url": SECURE_URL, "public_id": "x"}

        url = self.make_host().upload(IMAGE, "image/png")

        assert url == SECURE_URL
        args, kwargs = mock_upload.call_args
        assert args[0] == IMAGE
        assert kwargs["resource_type"] == "image"
        assert kwargs["timeout"] == 5

    @patch("helpers.image_upload_helper.cloudinary.uploader.upload")
    def test_missing_credentials(self, mock_upload, mock_config):
        host = self.make_host()
        host.api_secret = None
        with pytest.raises(ImageUploadError):
            host.upload(IMAGE, "image/png")
        assert mock_upload.call_count == 0

    @patch("helpers.image_upload_helper.cloudinary.uploader.upload")
    def test_sdk_error_is_surfaced(self, mock_upload, _mock_config):
        mock_upload.side_effect = cloudinary.exceptions.AuthorizationRequired("Invalid Signature")
        with pytest.raises(UpstreamFailure):
            self.make_host().upload(IMAGE, "image/png")

    @patch("helpers.image_upload_helper.cloudinary.uploader.upload")
    def test_io_error_is_surfaced(self, mock_upload, _mock_config):
        mock_upload.side_effect = ConnectionResetError("reset by peer")
        with pytest.raises(ImageUploadError):
            self.make_host().upload(IMAGE, "image/png")

    @patch("helpers.image_upload_helper.cloudinary.uploader.upload")
    def test_response_without_url_is_surfaced(self, mock_upload, _mock_config):
        mock_upload.return_value = {"public_id": "x"}
        with pytest.raises(ImageUploadError):
            self.make_host().upload(IMAGE, "image/png")

class TestLocalImageHost:
    """Uploads stored on local disk."""

    def test_writes_file_and_returns_url(self, tmp_path):
        host = LocalImageHost(upload_dir=tmp_path, base_url="http://localhost:8000/")

        url = host.upload(IMAGE, "image/png")

        assert url.startswith("http://localhost:8000/uploads/")
        assert url.endswith(".png")
        stored = tmp_path / url.rsplit("/", 1)[1]
        assert stored.read_bytes() == IMAGE

    def test_unknown_content_type(self, tmp_path):
        host = LocalImageHost(upload_dir=tmp_path, base_url="http://localhost:8000")
        assert host.upload(IMAGE, None).endswith(".bin")
