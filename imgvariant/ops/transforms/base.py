"""
Base class for transformers that produce image variants.

A transformer applies a set of transformations to a source image and hands
the encoded result to a caller inside a temp file it owns. Concrete
transformers (see :mod:`imgvariant.ops.transforms.pillow`) implement
:meth:`Transformer.process`; :meth:`Transformer.accept` decides which
transformer handles a given blob.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import IO, Any, Callable, Iterator, Mapping, Optional, Tuple, TypeVar

from imgvariant.domain.types.blob import BlobInfo
from imgvariant.io.fs import dispose_tempfile, new_tempfile, temporary_file
from imgvariant.io.settings import get_settings
from imgvariant.ops.pipeline import TransformationsLike

logger = logging.getLogger(__name__)

R = TypeVar("R")


class Transformer(ABC):
    """Applies an ordered list of transformations to an image."""

    def __init__(self, transformations: TransformationsLike = ()):
        if isinstance(transformations, Mapping):
            transformations = transformations.items()
        self._transformations: Tuple[Any, ...] = tuple(transformations)

    @property
    def transformations(self) -> Tuple[Any, ...]:
        return self._transformations

    @classmethod
    def accept(cls, blob: BlobInfo) -> bool:
        """
        Return True when this transformer can generate a variant from ``blob``.
        Concrete transformers override this.
        """
        return False

    def transform(self, file, *, format: str, block: Callable[[IO[bytes]], R]) -> R:
        """
        Apply the transformations to the source image in ``file``, producing a
        target image in ``format``. Calls ``block`` with an open temp file
        containing the target image, then closes and unlinks it. Returns the
        result of ``block``.
        """
        with self.transformed(file, format=format) as output:
            return block(output)

    @contextmanager
    def transformed(self, file, *, format: str) -> Iterator[IO[bytes]]:
        """Context manager form of :meth:`transform`."""
        output = self.process(file, format=format)
        try:
            logger.debug("%r produced %s", self, output.name)
            yield output
        except BaseException:
            dispose_tempfile(output, suppress=True)
            raise
        dispose_tempfile(output)

    @contextmanager
    def create_tempfile(self, ext: Optional[str] = "") -> Iterator[IO[bytes]]:
        """Yield a scratch binary temp file, removed when the block exits."""
        settings = get_settings()
        with temporary_file(ext, prefix=settings.tempfile_prefix, dir=settings.tmp_dir) as tmp:
            yield tmp

    def _new_output(self, ext: Optional[str] = "") -> IO[bytes]:
        """
        Create the temp file :meth:`process` returns. Ownership passes to the
        caller of :meth:`process` on success.
        """
        settings = get_settings()
        return new_tempfile(ext, prefix=settings.tempfile_prefix, dir=settings.tmp_dir)

    @abstractmethod
    def process(self, file, *, format: str) -> IO[bytes]:
        """
        Return an open temp file containing the transformed image in ``format``.
        Implementations dispose of the temp file only when they fail.
        """
        raise NotImplementedError

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"{self.__class__.__name__}(transformations={list(self._transformations)!r})"


__all__ = ["Transformer"]
