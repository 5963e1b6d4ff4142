import os
from io import BytesIO

import pytest
from PIL import Image

from conftest import make_mpo, make_png
from eid_greeting.errors import ImageValidationError
from eid_greeting.prompts.presets import CARD_MASK, CARD_PRESET, SCENE_PRESET
from eid_greeting.services.images import (
    TempWorkspace,
    compress_png,
    correct_image_format,
    create_text_mask,
    load_image,
    overlay_greeting_text,
    prepare_for_openai,
    prepare_for_stability,
)


def open_png(data: bytes) -> Image.Image:
    return Image.open(BytesIO(data))


def test_load_image_rejects_garbage_and_unsupported_formats():
    with pytest.raises(ImageValidationError):
        load_image(b"definitely not an image")
    with pytest.raises(ImageValidationError, match="JPEG, PNG, or GIF"):
        load_image(make_png(mode="RGB", fmt="BMP"))
    with pytest.raises(ImageValidationError, match="Image data is required"):
        load_image(b"")


def test_load_image_accepts_multi_picture_jpeg():
    img = load_image(make_mpo())
    assert img.format == "MPO"
    assert img.size == (320, 240)


def test_load_image_reports_oversized_dimensions_as_validation_error(monkeypatch):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

    with pytest.raises(ImageValidationError, match="dimensions"):
        load_image(make_png(size=(64, 48)))


def test_prepare_for_openai_keeps_small_images_small():
    img = open_png(prepare_for_openai(make_png(size=(300, 200), mode="RGB", fmt="JPEG")))
    assert img.format == "PNG"
    assert img.mode == "RGBA"
    assert img.size == (300, 200)


def test_prepare_for_openai_shrinks_large_images():
    img = open_png(prepare_for_openai(make_png(size=(2048, 1024))))
    assert img.size == (1024, 512)


def test_prepare_for_openai_square_matches_mask_canvas():
    img = open_png(prepare_for_openai(make_png(size=(300, 200)), square=True))
    assert img.size == (1024, 1024)
    assert img.getpixel((0, 0))[3] == 0
    assert img.getpixel((512, 512))[:3] == (200, 30, 30)


def test_prepare_for_openai_rejects_oversize(monkeypatch):
    monkeypatch.setattr("eid_greeting.services.images.MAX_OPENAI_IMAGE_BYTES", 10)
    with pytest.raises(ImageValidationError, match="Must be under 4MB"):
        prepare_for_openai(make_png())


def test_correct_image_format_centres_on_white_canvas():
    img = open_png(correct_image_format(make_png(size=(100, 100))))
    assert img.mode == "RGBA"
    assert img.size == (1024, 1024)
    assert img.getpixel((0, 0)) == (255, 255, 255, 255)
    assert img.getpixel((512, 512)) == (200, 30, 30, 255)


def test_prepare_for_stability_scene_is_square():
    img = open_png(prepare_for_stability(make_png(size=(300, 200)), SCENE_PRESET))
    assert img.size == (1024, 1024)


def test_prepare_for_stability_accepts_multi_picture_jpeg():
    img = open_png(prepare_for_stability(make_mpo(), SCENE_PRESET))
    assert img.size == (1024, 1024)


def test_prepare_for_stability_card_leaves_headroom_for_text():
    img = open_png(prepare_for_stability(make_png(size=(200, 200)), CARD_PRESET))
    assert img.size == (1024, 1024)
    assert img.getpixel((512, 20)) == (255, 255, 255)
    assert img.getpixel((512, CARD_PRESET.headroom + 434)) == (200, 30, 30)


def test_prepare_for_stability_rejects_oversize(monkeypatch):
    monkeypatch.setattr("eid_greeting.services.images.MAX_STABILITY_IMAGE_BYTES", 10)
    with pytest.raises(ImageValidationError, match="Must be under 10MB"):
        prepare_for_stability(make_png(), SCENE_PRESET)


def test_create_text_mask_layout():
    mask = open_png(create_text_mask(CARD_MASK))
    assert mask.size == (1024, 1024)
    # centro protegido
    assert mask.getpixel((512, 512)) == (0, 0, 0, 255)
    # bandas editables
    assert mask.getpixel((512, 10)) == (255, 255, 255, 0)
    assert mask.getpixel((512, 1020)) == (255, 255, 255, 0)
    assert mask.getpixel((10, 512)) == (255, 255, 255, 0)
    assert mask.getpixel((1020, 512)) == (255, 255, 255, 0)
    assert mask.getpixel((512, CARD_MASK.top)) == (0, 0, 0, 255)
    assert mask.getpixel((CARD_MASK.side, 512)) == (0, 0, 0, 255)


def test_create_text_mask_follows_canvas_size():
    assert open_png(create_text_mask(CARD_MASK, size=512)).size == (512, 512)


def test_overlay_greeting_text_draws_on_image():
    base = make_png(size=(1024, 1024), color=(20, 90, 160, 255))
    result = open_png(overlay_greeting_text(base, "From all of us"))
    assert result.size == (1024, 1024)
    assert list(result.getdata()) != list(open_png(base).convert("RGBA").getdata())


def test_compress_png_passes_small_images_through():
    data = make_png()
    assert compress_png(data) == data


def test_compress_png_rejects_when_still_too_large():
    with pytest.raises(ImageValidationError, match="too large for OpenAI"):
        compress_png(make_png(size=(256, 256)), limit=10)


def test_temp_workspace_removes_files_even_on_error(tmp_path):
    with pytest.raises(RuntimeError):
        with TempWorkspace("test", directory=str(tmp_path)) as workspace:
            first = workspace.write("image", b"one")
            second = workspace.write("mask", b"two")
            assert os.path.exists(first) and os.path.exists(second)
            raise RuntimeError("boom")
    assert os.listdir(tmp_path) == []
