"""
Registry for transformer implementations.

Transformers are tried in registration order; the first one whose
:meth:`~imgvariant.ops.transforms.base.Transformer.accept` returns True for a
blob handles it.
"""

from __future__ import annotations

import logging
from typing import List, Type, TypeVar

from imgvariant.domain.types.blob import BlobInfo
from imgvariant.exceptions import NoTransformerError
from imgvariant.ops.transforms.base import Transformer

logger = logging.getLogger(__name__)

TRANSFORMERS: List[Type[Transformer]] = []

T = TypeVar("T", bound=Type[Transformer])


def register_transformer(transformer_cls: T) -> T:
    """
    Register a transformer class. Usable as a class decorator; registering the
    same class twice keeps its original position.
    """
    if not (isinstance(transformer_cls, type) and issubclass(transformer_cls, Transformer)):
        raise TypeError(f"{transformer_cls!r} is not a Transformer subclass")
    if transformer_cls not in TRANSFORMERS:
        TRANSFORMERS.append(transformer_cls)
        logger.debug(f"Registered transformer {transformer_cls.__name__}")
    return transformer_cls


def unregister_transformer(transformer_cls: Type[Transformer]) -> None:
    if transformer_cls in TRANSFORMERS:
        TRANSFORMERS.remove(transformer_cls)


def can_transform(blob: BlobInfo) -> bool:
    return any(transformer_cls.accept(blob) for transformer_cls in TRANSFORMERS)


def find_transformer(blob: BlobInfo) -> Type[Transformer]:
    """Return the first registered transformer class that accepts ``blob``."""
    for transformer_cls in TRANSFORMERS:
        if transformer_cls.accept(blob):
            return transformer_cls
    raise NoTransformerError(
        f"No transformer accepts blob {blob.key or blob.filename!r} "
        f"with content type {blob.content_type!r}"
    )
