"""
Image utility functions for loading, scaling and saving poster layers
"""

import cv2
import numpy as np
from pathlib import Path
from typing import Union, Tuple
from PIL import Image


def load_image(image_path: Union[str, Path]) -> np.ndarray:
    """
    Load image from file path, keeping transparency

    Args:
        image_path: Path to image file

    Returns:
        Image as numpy array in RGBA format
    """
    image_path = Path(image_path)
    if not image_path.exists():
        raise FileNotFoundError(f"Image not found: {image_path}")

    img = cv2.imread(str(image_path), cv2.IMREAD_UNCHANGED)
    if img is None:
        raise ValueError(f"Failed to load image: {image_path}")

    # 16-bit PNGs
    if img.dtype == np.uint16:
        img = (img // 257).astype(np.uint8)

    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2RGBA)
    if img.shape[2] == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)
    return cv2.cvtColor(img, cv2.COLOR_BGR2RGBA)


def load_background(image_path: Union[str, Path], size: Tuple[int, int]) -> Image.Image:
    """
    Load a template background stretched to the canvas size

    Args:
        image_path: Path to background image
        size: (width, height) of the canvas

    Returns:
        RGBA PIL image of exactly `size`
    """
    img = Image.fromarray(load_image(image_path))
    if img.size != tuple(size):
        img = img.resize(size, Image.LANCZOS)
    return img


def save_image(image: Image.Image, output_path: Union[str, Path], quality: int = 95) -> None:
    """
    Save image to file

    Args:
        image: PIL image (RGBA or RGB)
        output_path: Output file path; the suffix selects the encoder
        quality: JPEG/WebP quality (1-100)
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    suffix = output_path.suffix.lower()
    rgba = np.array(image.convert("RGBA"))

    if suffix in ['.jpg', '.jpeg']:
        img_bgr = cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGR)
        cv2.imwrite(str(output_path), img_bgr, [cv2.IMWRITE_JPEG_QUALITY, quality])
    elif suffix == '.webp':
        img_bgra = cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA)
        cv2.imwrite(str(output_path), img_bgra, [cv2.IMWRITE_WEBP_QUALITY, quality])
    else:
        img_bgra = cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA)
        cv2.imwrite(str(output_path), img_bgra)
