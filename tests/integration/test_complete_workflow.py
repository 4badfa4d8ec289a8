"""
Integration Tests for the avgstego file workflow

These tests go through real image files: load a carrier, embed, save,
reload and extract, the way the command line tool does.
"""

import io

import pytest
import numpy as np
from PIL import Image

from avgstego import AverageStego
from avgstego.carrier import load_image, save_image
from avgstego.errors import StegoError


LOREM = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod "
    "tempor incididunt ut labore et dolore magna aliqua. Ut enim ad minim veniam, "
    "quis nostrud exercitation ullamco laboris nisi ut aliquip ex ea commodo "
    "consequat. Duis aute irure dolor in reprehenderit in voluptate velit esse "
    "cillum dolore eu fugiat nulla pariatur."
)


@pytest.fixture
def stego():
    return AverageStego()


@pytest.fixture
def photo_like(temp_directory):
    """A smooth RGB image with some texture, saved as PNG."""
    yy, xx = np.mgrid[0:180, 0:240]
    img_array = np.zeros((180, 240, 3), dtype=np.uint8)
    img_array[:, :, 0] = (xx * 255 // 239).astype(np.uint8)
    img_array[:, :, 1] = (128 + 100 * np.sin(xx / 9.0) * np.cos(yy / 7.0)).astype(np.uint8)
    img_array[:, :, 2] = (yy * 255 // 179).astype(np.uint8)
    path = temp_directory / "photo.png"
    Image.fromarray(img_array).save(str(path))
    return path


class TestFileWorkflow:
    """Integration tests for embedding through files on disk."""

    def test_text_document_round_trip(self, stego, photo_like, temp_directory):
        """Embed a UTF-8 text file, reload the stego PNG and read it back."""
        text_file = temp_directory / "lorem-ipsum.txt"
        text_file.write_text(LOREM, encoding="utf-8")
        data = text_file.read_text(encoding="utf-8").encode("utf-8")

        output, result = stego.embed_file(photo_like, data, temp_directory / "out.png")
        assert result.capacity_used == len(data)

        extracted = stego.extract_file(output)
        assert extracted.data.decode("utf-8") == LOREM

    def test_unicode_payload(self, stego, photo_like, temp_directory):
        message = "مرحبا بالعالم 🌍 Hello World 日本語"
        output, _ = stego.embed_file(photo_like, message.encode("utf-8"), temp_directory / "u.png")
        assert stego.extract_file(output).data.decode("utf-8") == message

    @pytest.mark.parametrize("suffix", [".png", ".bmp", ".tiff"])
    def test_lossless_formats(self, stego, photo_like, temp_directory, suffix):
        payload = bytes(range(256)) * 4
        output, _ = stego.embed_file(photo_like, payload, temp_directory / f"out{suffix}")
        assert stego.extract_file(output).data == payload

    def test_default_output_path(self, stego, photo_like):
        output, _ = stego.embed_file(photo_like, b"beside the carrier")
        assert output == photo_like.with_name("photo.stego.png")
        assert stego.extract_file(output).data == b"beside the carrier"

    def test_jpeg_carrier_in_png_out(self, stego, photo_like, temp_directory):
        """Lossy input is fine as long as the output is lossless."""
        jpeg_path = temp_directory / "photo.jpg"
        Image.open(photo_like).convert("RGB").save(str(jpeg_path), quality=70)

        output, _ = stego.embed_file(jpeg_path, b"from a jpeg", temp_directory / "out.png")
        assert stego.extract_file(output).data == b"from a jpeg"

    def test_reembedding_replaces_payload(self, stego, photo_like, temp_directory):
        first, _ = stego.embed_file(photo_like, b"first payload", temp_directory / "a.png")
        second, _ = stego.embed_file(first, b"second", temp_directory / "b.png")
        assert stego.extract_file(second).data == b"second"

    def test_same_seed_same_pixels(self, stego, photo_like, temp_directory):
        """Embedding twice with one seed produces identical files' pixels."""
        a, _ = stego.embed_file(photo_like, b"deterministic", temp_directory / "a.png", seed=2024)
        b, _ = stego.embed_file(photo_like, b"deterministic", temp_directory / "b.png", seed=2024)
        assert np.array_equal(load_image(a), load_image(b))

    def test_in_memory_png(self, stego, photo_like):
        """Round trip through an in-memory PNG buffer."""
        result = stego.embed(b"buffer", Image.open(photo_like))
        buffer = io.BytesIO()
        result.to_image().save(buffer, format="PNG")
        buffer.seek(0)
        assert stego.extract(Image.open(buffer)).data == b"buffer"


class TestLimitations:
    """The codec has no integrity check; alterations go undetected or break headers."""

    def test_jpeg_recompression_corrupts(self, stego, photo_like, temp_directory):
        payload = b"this will not survive JPEG"
        output, _ = stego.embed_file(photo_like, payload, temp_directory / "out.jpg")

        try:
            extracted = stego.extract_file(output).data
        except StegoError:
            return
        assert extracted != payload

    def test_modified_carrier_pixel_changes_byte_silently(self, stego):
        pixels = np.full((60, 60, 4), 120, dtype=np.uint8)
        result = stego.embed(b"ABCDEFGH", pixels, seed=1)

        # No other payload pixel or header corner uses this one as a neighbor.
        x, y = result.coordinates[3]
        pixels[y, x, 1] += 1
        extracted = stego.extract(pixels).data

        assert len(extracted) == 8
        assert extracted[3] != ord("D")
        assert extracted[:3] + extracted[4:] == b"ABCEFGH"

    def test_saved_pixels_match_result(self, stego, photo_like, temp_directory):
        output, result = stego.embed_file(photo_like, b"exact", temp_directory / "x.png")
        assert np.array_equal(load_image(output), result.pixels)
        save_image(result.pixels, temp_directory / "y.png")
        assert stego.extract_file(temp_directory / "y.png").data == b"exact"
