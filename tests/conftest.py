# avgstego Test Configuration
# This file contains test settings and fixtures

import pytest
import sys
import os

import numpy as np
from PIL import Image

# Add python-core to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'python-core'))


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return os.path.dirname(os.path.dirname(__file__))


@pytest.fixture(scope="session")
def python_core_path(project_root):
    """Return path to python-core directory."""
    return os.path.join(project_root, 'python-core')


@pytest.fixture
def temp_directory(tmp_path):
    """Provide a temporary directory for test operations."""
    return tmp_path


@pytest.fixture
def noise_pixels():
    """A 100x100 RGBA grid of reproducible random noise, fully opaque."""
    rng = np.random.default_rng(20240601)
    pixels = rng.integers(0, 256, size=(100, 100, 4), dtype=np.uint8)
    pixels[:, :, 3] = 255
    return pixels


@pytest.fixture
def extreme_pixels():
    """A 64x48 grid mixing pure black and pure white blocks."""
    pixels = np.zeros((48, 64, 4), dtype=np.uint8)
    pixels[:, 32:, :3] = 255
    pixels[::2, :, 3] = 255
    return pixels


@pytest.fixture
def carrier_png(temp_directory):
    """Create a gradient RGB PNG carrier on disk."""
    img_array = np.zeros((120, 160, 3), dtype=np.uint8)
    img_array[:, :, 0] = np.linspace(0, 255, 160, dtype=np.uint8)[None, :]
    img_array[:, :, 1] = np.linspace(255, 0, 120, dtype=np.uint8)[:, None]
    img_array[40:80, 60:100, 2] = 200

    img = Image.fromarray(img_array, 'RGB')
    img_path = temp_directory / "carrier.png"
    img.save(str(img_path))
    return img_path


@pytest.fixture
def sample_data(temp_directory):
    """Provide sample text data for testing."""
    data_file = temp_directory / "sample.txt"
    data_file.write_text("Hello, World! This is test data for avgstego.", encoding="utf-8")
    return data_file


@pytest.fixture
def sample_binary_data(temp_directory):
    """Provide sample binary data for testing."""
    binary_file = temp_directory / "sample.bin"
    binary_file.write_bytes(b'\x00\x01\x02\x03\x04\x05\xff\xfe\xfd')
    return binary_file
