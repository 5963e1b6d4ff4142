import pytest

from eid_greeting.errors import ImageValidationError
from eid_greeting.utils import (
    decode_base64_image,
    is_remote_url,
    strip_data_url_prefix,
    to_data_uri,
)


def test_is_remote_url():
    assert is_remote_url("http://example.com/image.png")
    assert is_remote_url("https://example.com/image.png")
    assert not is_remote_url("ftp://example.com/image.png")
    assert not is_remote_url("data:image/png;base64,iVBORw0KGgo=")


def test_strip_data_url_prefix():
    data_url = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAUA"
    result = strip_data_url_prefix(data_url)
    assert result.startswith("iVBORw0KGgoAAAANSUhEUgAAAAUA")
    assert len(result) % 4 == 0

    assert strip_data_url_prefix("aGVs\nbG8") == "aGVsbG8="


def test_decode_base64_image():
    assert decode_base64_image("data:image/png;base64,aGVsbG8=") == b"hello"
    assert decode_base64_image("aGVsbG8") == b"hello"


def test_decode_base64_image_rejects_missing_and_invalid():
    with pytest.raises(ImageValidationError, match="Image data is required"):
        decode_base64_image("")
    with pytest.raises(ImageValidationError):
        decode_base64_image("data:image/png;base64,@@@not-base64@@@")


def test_to_data_uri():
    assert to_data_uri("abc") == "data:image/png;base64,abc"
    assert to_data_uri("abc", "image/jpeg") == "data:image/jpeg;base64,abc"
