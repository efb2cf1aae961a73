"""Atomic text writes: temp file in the same directory, then os.replace."""

import os
import shutil
import tempfile
from pathlib import Path

from evdeploy.errors import ConfigWriteError


def write_text_atomic(path, text: str) -> None:
    """Replace ``path`` with ``text`` so readers never see a half-written file.

    Raises:
        ConfigWriteError: on any filesystem error; the original file is left intact.
    """
    path = Path(path)
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False, encoding="utf-8"
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(text)
        if path.exists():
            shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise ConfigWriteError(path, e.strerror or str(e)) from e
