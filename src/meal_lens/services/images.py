"""Downscaling and recompression of meal photos for storage."""

import asyncio
import base64
import io
from dataclasses import dataclass

from PIL import Image, ImageOps, UnidentifiedImageError

from meal_lens.domain.errors import DecodeError, RenderSurfaceError

_ALPHA_MODES = {"RGBA", "LA", "P"}
_BACKGROUND = (255, 255, 255)


@dataclass
class ImagePreprocessor:
    """Re-encode images to a fixed width JPEG data URL.

    Every output is exactly ``target_width`` pixels wide. Narrower inputs
    are upscaled so stored thumbnails share one width.
    """

    target_width: int = 300
    quality: int = 70

    def process(self, image_bytes: bytes) -> str:
        """Return a ``data:image/jpeg;base64,...`` URL for the image."""
        image = _decode(image_bytes)
        encoded = base64.b64encode(self._render(image)).decode("utf-8")
        return f"data:image/jpeg;base64,{encoded}"

    async def process_async(self, image_bytes: bytes) -> str:
        """Run ``process`` in a worker thread."""
        return await asyncio.to_thread(self.process, image_bytes)

    def target_size(self, width: int, height: int) -> tuple[int, int]:
        """Return the output size for an input size, keeping aspect ratio."""
        scale = self.target_width / width
        return self.target_width, max(1, round(height * scale))

    def _render(self, image: Image.Image) -> bytes:
        try:
            flattened = _flatten(image)
            resized = flattened.resize(
                self.target_size(*flattened.size), Image.Resampling.LANCZOS
            )
            output = io.BytesIO()
            resized.save(output, format="JPEG", quality=self.quality)
        except (OSError, ValueError, MemoryError) as exc:
            raise RenderSurfaceError("Failed to render the resized image") from exc
        return output.getvalue()


def _decode(image_bytes: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(image_bytes))
        image.load()
        # Phone cameras store pixels rotated and record the display angle in EXIF.
        image = ImageOps.exif_transpose(image)
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        ValueError,
    ) as exc:
        raise DecodeError("Failed to decode the image") from exc
    return image


def _flatten(image: Image.Image) -> Image.Image:
    """Convert to RGB, painting transparent areas white."""
    if image.mode in _ALPHA_MODES:
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, _BACKGROUND)
        background.paste(rgba, mask=rgba.split()[-1])
        return background
    if image.mode != "RGB":
        return image.convert("RGB")
    return image
