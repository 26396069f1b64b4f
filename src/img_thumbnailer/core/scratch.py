"""Scratch files passed between pipeline stages."""

import os
import tempfile
from contextlib import contextmanager
from typing import Iterator, Optional

SCRATCH_PREFIX = "thumbnailer"


def new_scratch_file(suffix: str = "", directory: Optional[str] = None) -> str:
    """Create an empty, uniquely named scratch file and return its path."""
    fd, path = tempfile.mkstemp(prefix=SCRATCH_PREFIX, suffix=suffix, dir=directory)
    os.close(fd)
    return path


def discard(path: Optional[str]) -> None:
    """Delete a scratch file if it still exists."""
    if not path:
        return
    try:
        os.remove(path)
    except FileNotFoundError:
        pass


@contextmanager
def scratch_file(suffix: str = "", directory: Optional[str] = None) -> Iterator[str]:
    """
    Yield a new scratch file path that is removed if the block raises.

    On success the file is kept and ownership passes to the caller.
    """
    path = new_scratch_file(suffix=suffix, directory=directory)
    try:
        yield path
    except BaseException:
        discard(path)
        raise
