import logging
import os
import tempfile
from contextlib import contextmanager
from typing import IO, Iterator, Optional

logger = logging.getLogger(__name__)

TEMPFILE_PREFIX = "transformer_"


def silent_remove(file_path: str) -> None:
    """
    Unlink a temp file, treating one that is already gone as removed.

    :param file_path: Path of the temp file.
    :type file_path: str
    :raises OSError: For anything but a missing file, e.g. a directory in the way.
    """
    try:
        os.unlink(file_path)
    except FileNotFoundError:
        logger.debug(f"Temp file {file_path} was already removed")


def get_file_ext(path: str) -> str:
    """
    Extracts file extension from a given path.

    :param path: Path to file.
    :type path: str
    :returns: File extension without name
    :rtype: :class:`str`
    :Usage example:

     .. code-block::

        from imgvariant.io.fs import get_file_ext

        file_ext = get_file_ext("/home/admin/work/photos/IMG_0748.jpeg")

        print(file_ext)
        # Output: .jpeg
    """
    return os.path.splitext(os.path.basename(path))[1]


def normalize_ext(ext: Optional[str]) -> str:
    """
    Turn ``"png"`` into ``".png"``; empty values stay empty.

    :param ext: Extension with or without the leading dot.
    :type ext: str, optional
    :returns: Extension suitable for a temp file suffix
    :rtype: :class:`str`
    """
    if not ext:
        return ""
    ext = str(ext).strip()
    if not ext or ext.startswith("."):
        return ext
    return f".{ext}"


def new_tempfile(
    ext: Optional[str] = "", prefix: str = TEMPFILE_PREFIX, dir: Optional[str] = None
) -> IO[bytes]:
    """
    Create an open, uniquely named binary temp file. The caller owns it and
    must hand it to :func:`dispose_tempfile`.
    """
    tmp = tempfile.NamedTemporaryFile(
        mode="w+b", prefix=prefix, suffix=normalize_ext(ext), dir=dir, delete=False
    )
    logger.debug(f"Created temp file {tmp.name}")
    return tmp


def dispose_tempfile(tmp: IO[bytes], suppress: bool = False) -> None:
    """
    Close and unlink a temp file created by :func:`new_tempfile`.

    A file that is already gone is not an error. With ``suppress=True`` any
    other ``OSError`` is logged instead of raised, so that an exception already
    in flight is not replaced by the cleanup failure.
    """
    try:
        try:
            tmp.close()
        finally:
            silent_remove(tmp.name)
    except OSError as e:
        if not suppress:
            raise
        logger.warning(f"Failed to remove temp file {tmp.name}: {e}")
    else:
        logger.debug(f"Removed temp file {tmp.name}")


@contextmanager
def temporary_file(
    ext: Optional[str] = "", prefix: str = TEMPFILE_PREFIX, dir: Optional[str] = None
) -> Iterator[IO[bytes]]:
    """
    Yield a fresh binary temp file and dispose of it when the block exits,
    however it exits.

    :Usage example:

     .. code-block:: python

        from imgvariant.io.fs import temporary_file

        with temporary_file(ext="png") as tmp:
            image.save(tmp, format="PNG")
    """
    tmp = new_tempfile(ext, prefix=prefix, dir=dir)
    try:
        yield tmp
    except BaseException:
        dispose_tempfile(tmp, suppress=True)
        raise
    dispose_tempfile(tmp)
