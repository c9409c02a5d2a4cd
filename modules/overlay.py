"""
Overlay Module - Stamp decorative assets onto a canvas with random or explicit geometry
"""

import math
import random
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Tuple

import cv2
import numpy as np
from loguru import logger
from PIL import Image

from config import OverlayLayer, OverlayPosition
from utils.image_utils import load_image


class RandomSource(Protocol):
    """Anything with random.Random's uniform()"""

    def uniform(self, a: float, b: float) -> float:
        ...


@dataclass(frozen=True)
class InstanceGeometry:
    """Where and how one overlay instance is drawn"""
    x: float
    y: float
    scale: float
    rotation: float  # degrees, about the top-left corner
    alpha: float
    width: float
    height: float


def rand_between(rng: RandomSource, a: float, b: float) -> float:
    lo, hi = min(a, b), max(a, b)
    return rng.uniform(lo, hi)


def choose_assets(pool: Sequence[str], n: int, rng: RandomSource) -> List[str]:
    """
    Pick n assets, distinct while the pool lasts

    The whole pool is shuffled and the first n taken; when n exceeds the
    pool size the shuffled order repeats from the start.
    """
    if n <= 0 or not pool:
        return []

    shuffled = list(pool)
    for i in range(len(shuffled) - 1, 0, -1):
        j = min(i, int(rng.uniform(0, i + 1)))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]

    chosen = shuffled[:min(n, len(shuffled))]
    while len(chosen) < n:
        chosen.append(shuffled[len(chosen) % len(shuffled)])
    return chosen


def find_asset(pool: Sequence[str], name: str) -> Optional[str]:
    """Find a pool entry by case-insensitive file name"""
    wanted = name.strip().lower()
    for path in pool:
        if Path(path).name.lower() == wanted:
            return path
    return None


def resolve_geometry(
    position: OverlayPosition,
    layer: OverlayLayer,
    asset_size: Tuple[int, int],
    canvas_size: Tuple[int, int],
    rng: RandomSource,
) -> InstanceGeometry:
    """
    Resolve one instance's geometry

    Each value comes from the explicit override, else (when the layer is
    randomized) a uniform draw from the layer's range, else the default.
    Random values are drawn in the order scale, rotation, alpha, x, y.

    Args:
        position: Per-instance overrides (may be empty)
        layer: Owning layer
        asset_size: (width, height) of the unscaled asset
        canvas_size: (width, height) of the canvas
        rng: Random source

    Returns:
        Resolved geometry
    """
    def pick(explicit: Optional[float], value_range: Tuple[float, float], default: float) -> float:
        if explicit is not None:
            return explicit
        if layer.randomize:
            return rand_between(rng, *value_range)
        return default

    scale = pick(position.scale, layer.scale_range, 1.0)
    rotation = pick(position.rotation, layer.rotation_range, 0.0)
    alpha = pick(position.alpha, layer.alpha_range, 1.0)

    width = asset_size[0] * scale
    height = asset_size[1] * scale

    # Random placement keeps the unrotated box inside the canvas
    x = pick(position.x, (0, max(0.0, canvas_size[0] - width)), 0.0)
    y = pick(position.y, (0, max(0.0, canvas_size[1] - height)), 0.0)

    return InstanceGeometry(
        x=x, y=y, scale=scale, rotation=rotation, alpha=alpha, width=width, height=height
    )


class OverlayCompositor:
    """
    Draws every enabled overlay layer onto a canvas
    """

    def __init__(self, rng: RandomSource = None):
        """
        Initialize compositor

        Args:
            rng: Random source for asset selection and geometry (default: random.Random())
        """
        self.rng = rng or random.Random()

    def composite(
        self,
        canvas: Image.Image,
        width: int,
        height: int,
        layers: Optional[Sequence[OverlayLayer]],
        asset_pool: Sequence[str],
    ) -> int:
        """
        Composite overlay layers in place

        Args:
            canvas: RGBA canvas, modified in place
            width: Canvas width used for random placement
            height: Canvas height used for random placement
            layers: Layer configurations, drawn in order
            asset_pool: Available asset paths

        Returns:
            Number of instances drawn
        """
        if not layers:
            return 0

        drawn = 0
        for layer_index, layer in enumerate(layers):
            if not layer.enable:
                continue

            count = max(0, math.floor(layer.count or 0))
            if count == 0:
                continue

            chosen = choose_assets(asset_pool, count, self.rng)
            logger.debug(f"Overlay layer {layer_index}: {count} instance(s) from {len(asset_pool)} asset(s)")

            for i in range(count):
                position = layer.positions[i] if i < len(layer.positions) else OverlayPosition()

                asset_path = find_asset(asset_pool, position.asset) if position.asset else None
                if asset_path is None and i < len(chosen):
                    asset_path = chosen[i]
                if asset_path is None:
                    continue

                try:
                    asset = load_image(asset_path)
                except (FileNotFoundError, ValueError) as e:
                    logger.warning(f"Skipping overlay asset {asset_path}: {e}")
                    continue

                geometry = resolve_geometry(
                    position, layer, (asset.shape[1], asset.shape[0]), (width, height), self.rng
                )
                if self._draw_instance(canvas, asset, geometry):
                    drawn += 1

        return drawn

    @staticmethod
    def _draw_instance(canvas: Image.Image, asset: np.ndarray, geometry: InstanceGeometry) -> bool:
        """
        Draw one asset: translate to (x, y), rotate about that point, scale

        Each instance is warped into its own transparent layer, so no
        transform or opacity carries over to the next one.
        """
        if geometry.scale == 0:
            return False

        theta = math.radians(geometry.rotation)
        a = math.cos(theta) * geometry.scale
        b = math.sin(theta) * geometry.scale
        matrix = np.float32([
            [a, -b, geometry.x],
            [b, a, geometry.y],
        ])

        # Interpolate premultiplied colour: edge pixels lose coverage, not brightness
        premultiplied = asset.astype(np.float32)
        premultiplied[:, :, :3] *= premultiplied[:, :, 3:4] / 255.0

        warped = cv2.warpAffine(
            premultiplied,
            matrix,
            canvas.size,
            flags=cv2.INTER_LINEAR,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=(0, 0, 0, 0),
        )

        coverage = warped[:, :, 3:4]
        rgb = np.where(coverage > 0, warped[:, :, :3] * 255.0 / np.maximum(coverage, 1e-6), 0)

        alpha = min(1.0, max(0.0, geometry.alpha))
        layer = np.dstack([rgb, coverage * alpha])
        layer = np.rint(np.clip(layer, 0, 255)).astype(np.uint8)

        canvas.alpha_composite(Image.fromarray(layer))
        return True
