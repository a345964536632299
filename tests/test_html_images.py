import base64

import pytest
import requests

from slidewright import from_html
from slidewright.html_images import (USER_AGENT, ImageResolver, ImageSourceError,
                                     decode_data_uri, intrinsic_size)

RED_PIXEL_PNG = ("data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8"
                 "z8DwHwAFBQIAX8jx0gAAAABJRU5ErkJggg==")


class FakeResponse:
    def __init__(self, status_code=200, content=b"", headers=None):
        self.status_code = status_code
        self.content = content
        self.headers = headers or {}


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []
        self.closed = False

    def get(self, url, headers=None, timeout=None):
        self.calls.append((url, headers, timeout))
        if self.error is not None:
            raise self.error
        return self.response

    def close(self):
        self.closed = True


class TestDataUri:
    def test_png(self):
        data, ext = decode_data_uri(RED_PIXEL_PNG)
        assert data.startswith(b"\x89PNG")
        assert ext == "png"

    def test_jpeg_mime_maps_to_jpg(self, jpeg_bytes):
        uri = "data:image/jpeg;base64," + base64.b64encode(jpeg_bytes).decode()
        data, ext = decode_data_uri(uri)
        assert data == jpeg_bytes
        assert ext == "jpg"

    def test_urlsafe_and_unpadded(self, png_bytes):
        encoded = base64.urlsafe_b64encode(png_bytes).decode().rstrip("=")
        data, _ = decode_data_uri("data:image/png;base64," + encoded)
        assert data == png_bytes

    def test_wrapped_payload(self, png_bytes):
        encoded = base64.b64encode(png_bytes).decode()
        wrapped = "\n".join(encoded[i:i + 20] for i in range(0, len(encoded), 20))
        assert decode_data_uri("data:image/png;base64," + wrapped)[0] == png_bytes

    def test_percent_encoded_payload(self):
        data, ext = decode_data_uri("data:image/svg+xml,%3Csvg%3E%3C/svg%3E")
        assert data == b"<svg></svg>"
        assert ext == "svg"

    def test_garbage_raises(self):
        with pytest.raises(ImageSourceError):
            decode_data_uri("data:image/png;base64,@@@@")
        with pytest.raises(ImageSourceError):
            decode_data_uri("data:image/png;base64")


class TestResolver:
    def test_data_uri_size(self):
        image = ImageResolver().resolve(RED_PIXEL_PNG)
        assert (image.width_px, image.height_px) == (1, 1)
        assert image.has_size

    def test_local_file_relative_to_base_dir(self, tmp_path, png_bytes):
        (tmp_path / "pic.png").write_bytes(png_bytes)
        image = ImageResolver(base_dir=tmp_path).resolve("pic.png")
        assert image.data == png_bytes
        assert image.ext == "png"
        assert (image.width_px, image.height_px) == (40, 20)

    def test_local_file_signature_only(self, tmp_path):
        path = tmp_path / "stub.png"
        path.write_bytes(b"\x89PNG\r\n\x1a\n")
        image = ImageResolver().resolve(str(path))
        assert image.ext == "png"
        assert not image.has_size

    def test_missing_local_file(self, tmp_path):
        with pytest.raises(ImageSourceError):
            ImageResolver(base_dir=tmp_path).resolve("nope.png")

    def test_extension_sniffed_when_path_has_none(self, tmp_path, jpeg_bytes):
        (tmp_path / "photo").write_bytes(jpeg_bytes)
        assert ImageResolver(base_dir=tmp_path).resolve("photo").ext == "jpeg"

    def test_download(self, png_bytes):
        session = FakeSession(FakeResponse(200, png_bytes, {"Content-Type": "image/png"}))
        image = ImageResolver(timeout=5, session=session).resolve("https://example.com/img?id=3")
        assert image.data == png_bytes
        assert image.ext == "png"
        url, headers, timeout = session.calls[0]
        assert headers["User-Agent"] == USER_AGENT
        assert timeout == 5

    def test_download_extension_from_url(self, jpeg_bytes):
        session = FakeSession(FakeResponse(200, jpeg_bytes, {"Content-Type": "application/octet-stream"}))
        image = ImageResolver(session=session).resolve("http://example.com/a/photo.jpg")
        assert image.ext == "jpg"

    def test_download_non_200(self):
        session = FakeSession(FakeResponse(404))
        with pytest.raises(ImageSourceError, match="HTTP 404"):
            ImageResolver(session=session).resolve("http://example.com/x.png")

    def test_download_network_error(self):
        session = FakeSession(error=requests.ConnectionError("refused"))
        with pytest.raises(ImageSourceError):
            ImageResolver(session=session).resolve("http://example.com/x.png")


def test_intrinsic_size_of_garbage():
    assert intrinsic_size(b"not an image") == (0, 0)


class TestSessionLifetime:
    def test_owned_session_closed_on_exit(self, monkeypatch):
        created = []

        def make_session():
            created.append(FakeSession())
            return created[-1]

        monkeypatch.setattr(requests, "Session", make_session)
        with ImageResolver() as resolver:
            resolver.resolve(RED_PIXEL_PNG)
        assert created[0].closed

    def test_caller_session_left_open(self):
        session = FakeSession()
        with ImageResolver(session=session):
            pass
        assert not session.closed

    def test_from_html_closes_its_session(self, monkeypatch):
        created = []

        def make_session():
            created.append(FakeSession())
            return created[-1]

        monkeypatch.setattr(requests, "Session", make_session)
        from_html(f'<h1>T</h1><img src="{RED_PIXEL_PNG}">')
        assert len(created) == 1
        assert created[0].closed
