"""
Transformer backed by Pillow.

Transformations are given as ``{name: arguments}`` pairs, for example::

    PillowTransformer({"resize_to_limit": [100, 100], "rotate": 90})

Only the operations listed in :data:`SUPPORTED_METHODS` are allowed, and their
arguments must be plain data (numbers, strings, booleans, lists, dicts).
"""

from __future__ import annotations

import logging
import mimetypes
from typing import IO, Any, Callable, Dict, List, Optional, Tuple

from PIL import Image, ImageOps

from imgvariant.domain.types.blob import BlobInfo
from imgvariant.exceptions import (
    UnsupportedFormatError,
    UnsupportedImageProcessingArgument,
    UnsupportedImageProcessingMethod,
)
from imgvariant.io.fs import dispose_tempfile, normalize_ext
from imgvariant.io.settings import get_settings
from imgvariant.ops.pipeline import Operation, normalize_transformations
from imgvariant.ops.transforms.base import Transformer
from imgvariant.ops.transforms.registry import register_transformer

logger = logging.getLogger(__name__)

# Keys that describe how to load or encode, not what to do to the pixels.
IGNORED_KEYS = ("loader", "format")

_PLAIN_TYPES = (type(None), bool, int, float, str)

# Encoders that cannot store every Pillow mode.
_ENCODER_MODES = {
    "JPEG": ("L", "RGB", "CMYK"),
    "PNG": ("1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"),
    "WEBP": ("RGB", "RGBA"),
    "GIF": ("1", "L", "P", "RGB", "RGBA"),
    "BMP": ("1", "L", "P", "RGB", "RGBA"),
}


def resolve_format(format: str) -> Tuple[str, str]:
    """
    Map a target format, given as an extension (``"png"``, ``".jpg"``) or a
    MIME type (``"image/webp"``), to ``(pillow_format, extension)``.

    Raises :class:`UnsupportedFormatError` when Pillow cannot write it.
    """
    Image.init()
    value = str(format or "").strip().lower()
    if "/" in value:
        for name, mime in Image.MIME.items():
            if mime.lower() == value and name in Image.SAVE:
                return name, _extension_for(name)
        raise UnsupportedFormatError(format)

    ext = normalize_ext(value)
    name = Image.registered_extensions().get(ext)
    if name is None or name not in Image.SAVE:
        raise UnsupportedFormatError(format)
    return name, ext


def _extension_for(pillow_format: str) -> str:
    mime = Image.MIME.get(pillow_format)
    ext = mimetypes.guess_extension(mime) if mime else None
    if ext and Image.registered_extensions().get(ext) == pillow_format:
        return ext
    for ext, name in Image.registered_extensions().items():
        if name == pillow_format:
            return ext
    return ""


def _validate_argument(name: str, argument: Any) -> None:
    if isinstance(argument, _PLAIN_TYPES):
        return
    if isinstance(argument, (list, tuple)):
        for item in argument:
            _validate_argument(name, item)
        return
    if isinstance(argument, dict):
        for key, value in argument.items():
            if not isinstance(key, str):
                raise UnsupportedImageProcessingArgument(
                    f"{name}: option keys must be strings, got {key!r}"
                )
            _validate_argument(name, value)
        return
    raise UnsupportedImageProcessingArgument(
        f"{name}: unsupported argument of type {type(argument).__name__}"
    )


def _as_list(argument: Any) -> List[Any]:
    if argument is None:
        return []
    if isinstance(argument, (list, tuple)):
        return list(argument)
    if isinstance(argument, str) and "x" in argument:
        # "800x600"
        return [int(part) if part else None for part in argument.split("x", 1)]
    return [argument]


def _split_options(argument: Any) -> Tuple[List[Any], Dict[str, Any]]:
    args = _as_list(argument)
    if args and isinstance(args[-1], dict):
        return args[:-1], dict(args[-1])
    return args, {}


def _fit_size(size: Tuple[int, int], width: Optional[int], height: Optional[int]) -> Tuple[int, int]:
    """Largest size with the same aspect ratio that fits in width x height"""
    w, h = size
    ratios = []
    if width:
        ratios.append(width / w)
    if height:
        ratios.append(height / h)
    if not ratios:
        return size
    ratio = min(ratios)
    return max(1, round(w * ratio)), max(1, round(h * ratio))


def _dimensions(argument: Any) -> Tuple[Optional[int], Optional[int], Dict[str, Any]]:
    args, options = _split_options(argument)
    if len(args) != 2:
        raise UnsupportedImageProcessingArgument(
            f"expected [width, height], got {argument!r}"
        )
    width, height = args
    return width, height, options


def _resize_to_limit(image: Image.Image, argument: Any) -> Image.Image:
    width, height, _ = _dimensions(argument)
    size = _fit_size(image.size, width, height)
    if size[0] >= image.width and size[1] >= image.height:
        return image
    return image.resize(size, Image.Resampling.LANCZOS)


def _resize_to_fit(image: Image.Image, argument: Any) -> Image.Image:
    width, height, _ = _dimensions(argument)
    size = _fit_size(image.size, width, height)
    if size == image.size:
        return image
    return image.resize(size, Image.Resampling.LANCZOS)


def _resize_to_fill(image: Image.Image, argument: Any) -> Image.Image:
    width, height, options = _dimensions(argument)
    centering = tuple(options.get("centering", (0.5, 0.5)))
    return ImageOps.fit(image, (width, height), Image.Resampling.LANCZOS, centering=centering)


def _resize_and_pad(image: Image.Image, argument: Any) -> Image.Image:
    width, height, options = _dimensions(argument)
    background = options.get("background")
    if isinstance(background, list):
        background = tuple(background)
    return ImageOps.pad(image, (width, height), Image.Resampling.LANCZOS, color=background)


def _resize(image: Image.Image, argument: Any) -> Image.Image:
    width, height, _ = _dimensions(argument)
    return image.resize((width or image.width, height or image.height), Image.Resampling.LANCZOS)


def _crop(image: Image.Image, argument: Any) -> Image.Image:
    args = _as_list(argument)
    if len(args) != 4:
        raise UnsupportedImageProcessingArgument(
            f"crop: expected [left, top, width, height], got {argument!r}"
        )
    left, top, width, height = args
    return image.crop((left, top, left + width, top + height))


def _rotate(image: Image.Image, argument: Any) -> Image.Image:
    args, options = _split_options(argument)
    try:
        degrees = float(args[0]) if args else 0.0
    except (TypeError, ValueError):
        raise UnsupportedImageProcessingArgument(f"rotate: expected an angle, got {argument!r}")
    if not degrees:
        return image
    fill = options.get("background")
    if isinstance(fill, list):
        fill = tuple(fill)
    # clockwise, Pillow rotates counter-clockwise
    return image.rotate(-degrees, expand=True, fillcolor=fill)


def _auto_orient(image: Image.Image, argument: Any) -> Image.Image:
    return ImageOps.exif_transpose(image)


def _flip(image: Image.Image, argument: Any) -> Image.Image:
    return ImageOps.flip(image)


def _flop(image: Image.Image, argument: Any) -> Image.Image:
    return ImageOps.mirror(image)


def _grayscale(image: Image.Image, argument: Any) -> Image.Image:
    if "A" in image.getbands():
        return image.convert("LA")
    return ImageOps.grayscale(image)


_COLOURSPACES = {"b-w": "L", "srgb": "RGB", "rgb": "RGB", "cmyk": "CMYK"}


def _colourspace(image: Image.Image, argument: Any) -> Image.Image:
    if isinstance(argument, (list, tuple)):
        argument = argument[0] if argument else None
    space = str(argument or "").lower()
    if space not in _COLOURSPACES:
        raise UnsupportedImageProcessingArgument(f"colourspace: unknown space {argument!r}")
    mode = _COLOURSPACES[space]
    if space == "b-w":
        return _grayscale(image, argument)
    return image if image.mode == mode else image.convert(mode)


IMAGE_OPERATIONS: Dict[str, Callable[[Image.Image, Any], Image.Image]] = {
    "resize_to_limit": _resize_to_limit,
    "resize_to_fit": _resize_to_fit,
    "resize_to_fill": _resize_to_fill,
    "resize_and_pad": _resize_and_pad,
    "resize": _resize,
    "crop": _crop,
    "rotate": _rotate,
    "auto_orient": _auto_orient,
    "flip": _flip,
    "flop": _flop,
    "grayscale": _grayscale,
    "colourspace": _colourspace,
}

# Operations that change how the image is written rather than its pixels.
SAVER_OPERATIONS = ("saver", "strip")

# Parameters of Image.save that saver options may not override.
RESERVED_SAVER_KEYS = ("fp", "format")

SUPPORTED_METHODS = tuple(IMAGE_OPERATIONS) + SAVER_OPERATIONS


def _prepare_mode(image: Image.Image, pillow_format: str) -> Image.Image:
    modes = _ENCODER_MODES.get(pillow_format)
    if modes is None or image.mode in modes:
        return image
    if "A" in image.getbands() and "RGBA" in modes:
        return image.convert("RGBA")
    return image.convert("RGB")


@register_transformer
class PillowTransformer(Transformer):
    """Transformer backed by Pillow."""

    @classmethod
    def accept(cls, blob: BlobInfo) -> bool:
        return blob.content_type in get_settings().variable_content_types

    @property
    def operations(self) -> List[Operation]:
        """Validated operations, in the order they are applied."""
        operations = []
        for operation in normalize_transformations(self.transformations):
            if operation.name in IGNORED_KEYS:
                continue
            if operation.name not in SUPPORTED_METHODS:
                raise UnsupportedImageProcessingMethod(
                    f"One or more of the provided transformation methods is not supported: "
                    f"{operation.name!r}"
                )
            _validate_argument(operation.name, operation.arguments)
            if operation.name == "saver" and not isinstance(operation.arguments, (dict, type(None))):
                raise UnsupportedImageProcessingArgument(
                    f"saver: expected a mapping of encoder options, got {operation.arguments!r}"
                )
            if operation.name == "saver":
                reserved = sorted(set(operation.arguments or {}) & set(RESERVED_SAVER_KEYS))
                if reserved:
                    raise UnsupportedImageProcessingArgument(
                        f"saver: options {reserved} are set by the transformer"
                    )
            operations.append(operation)
        return operations

    def process(self, file, *, format: str) -> IO[bytes]:
        pillow_format, ext = resolve_format(format)
        operations = self.operations

        output = self._new_output(ext)
        try:
            with Image.open(file) as source:
                image, save_options = self._apply(source, operations)
                encoded = _prepare_mode(image, pillow_format)
                if encoded.mode != image.mode:
                    # the source profile no longer describes the pixels
                    save_options.pop("icc_profile", None)
                image = encoded
                image.save(output, format=pillow_format, **save_options)
            output.flush()
            output.seek(0)
        except BaseException:
            dispose_tempfile(output, suppress=True)
            raise

        logger.debug(f"Encoded {pillow_format} variant into {output.name}")
        return output

    def _apply(
        self, source: Image.Image, operations: List[Operation]
    ) -> Tuple[Image.Image, Dict[str, Any]]:
        # loader: first frame only
        source.seek(0)
        image = source.copy()
        strip = False
        save_options: Dict[str, Any] = {}

        for operation in operations:
            if operation.arguments is False:
                continue
            if operation.name == "saver":
                save_options.update(operation.arguments or {})
            elif operation.name == "strip":
                strip = True
            else:
                image = IMAGE_OPERATIONS[operation.name](image, operation.arguments)

        if not strip:
            for key in ("exif", "icc_profile"):
                value = image.info.get(key)
                if value and key not in save_options:
                    save_options[key] = value

        quality = get_settings().default_quality
        if quality is not None:
            save_options.setdefault("quality", quality)
        return image, save_options


__all__ = ["PillowTransformer", "resolve_format", "SUPPORTED_METHODS"]
