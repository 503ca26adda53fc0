import numpy as np
import pytest
from PIL import Image


@pytest.fixture
def forged_png(tmp_path):
    """64x64 black PNG with a textured 16x16 patch at (0,0) copied to (40,40)."""
    rng = np.random.default_rng(7)
    img = np.zeros((64, 64, 3), dtype=np.uint8)
    img[0:16, 0:16] = rng.integers(0, 256, (16, 16, 3), dtype=np.uint8)
    img[40:56, 40:56] = img[0:16, 0:16]
    path = tmp_path / "forged.png"
    Image.fromarray(img).save(path)
    return path
