import base64
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from eid_greeting.deps import get_openai_client, get_stability_client
from eid_greeting.main import app


def make_png(size=(64, 48), color=(200, 30, 30, 255), mode="RGBA", fmt="PNG") -> bytes:
    img = Image.new(mode, size, color if mode == "RGBA" else color[:3])
    buffer = BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


def make_mpo(size=(320, 240)) -> bytes:
    """Two-frame JPEG with the multi-picture extension, as written by phone cameras."""
    first = Image.new("RGB", size, (180, 120, 60))
    second = Image.new("RGB", size, (60, 120, 180))
    buffer = BytesIO()
    first.save(buffer, format="MPO", save_all=True, append_images=[second])
    return buffer.getvalue()


def as_data_uri(img_bytes: bytes, mime: str = "image/png") -> str:
    return f"data:{mime};base64," + base64.b64encode(img_bytes).decode("ascii")


class FakeOpenAIClient:
    def __init__(self, edit_errors=None, url="https://images.example.com/eid.png",
                 chat_content=None, chat_error=None):
        self.edit_errors = list(edit_errors or [])
        self.url = url
        self.chat_content = chat_content
        self.chat_error = chat_error
        self.edit_calls = []
        self.chat_calls = []

    def is_configured(self):
        return True

    def edit_image(self, image_path, prompt, mask_path=None):
        with open(image_path, "rb") as f:
            image_bytes = f.read()
        self.edit_calls.append(
            {"image_path": image_path, "image": image_bytes, "prompt": prompt, "mask_path": mask_path}
        )
        if self.edit_errors:
            raise self.edit_errors.pop(0)
        return self.url

    def complete_json(self, prompt):
        self.chat_calls.append(prompt)
        if self.chat_error is not None:
            raise self.chat_error
        return self.chat_content


class FakeStabilityClient:
    def __init__(self, artifact=None, error=None):
        self.artifact = artifact or base64.b64encode(
            make_png(size=(1024, 1024), color=(20, 90, 160, 255))
        ).decode("ascii")
        self.error = error
        self.calls = []

    def is_configured(self):
        return True

    def image_to_image(self, image_bytes, prompt, preset):
        self.calls.append({"image": image_bytes, "prompt": prompt, "preset": preset})
        if self.error is not None:
            raise self.error
        return self.artifact


@pytest.fixture
def photo_uri():
    return as_data_uri(make_png(size=(300, 200), mode="RGB", fmt="JPEG"), "image/jpeg")


@pytest.fixture
def temp_dir(tmp_path, monkeypatch):
    monkeypatch.setattr("eid_greeting.services.images.TEMP_DIR", str(tmp_path))
    return tmp_path


@pytest.fixture
def fake_openai():
    return FakeOpenAIClient()


@pytest.fixture
def fake_stability():
    return FakeStabilityClient()


@pytest.fixture
def api_client(fake_openai, fake_stability, temp_dir):
    app.dependency_overrides[get_openai_client] = lambda: fake_openai
    app.dependency_overrides[get_stability_client] = lambda: fake_stability
    yield TestClient(app)
    app.dependency_overrides.clear()
