"""
Public package interface for imgvariant.

Transformers turn a source image into a variant in a target format. Pick one
for a blob with :func:`find_transformer`, then call
:meth:`Transformer.transform` with a block that consumes the temp file.
"""

from __future__ import annotations

from imgvariant.domain.types.blob import BlobInfo
from imgvariant.exceptions import (
    NoTransformerError,
    TransformerError,
    UnsupportedFormatError,
    UnsupportedImageProcessingArgument,
    UnsupportedImageProcessingMethod,
)
from imgvariant.io.settings import TransformerSettings, get_settings
from imgvariant.ops.pipeline import Operation, normalize_transformations
from imgvariant.ops.transforms import (
    PillowTransformer,
    Transformer,
    can_transform,
    find_transformer,
    register_transformer,
)
