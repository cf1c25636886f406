from __future__ import annotations

import logging
import os
import tempfile
import zipfile
from pathlib import Path

from apkview.domain.errors import ArchiveOpenError, EntryNotFoundError, IoError

LOG = logging.getLogger(__name__)


class ZipEntryExtractor:
    """
    Copies a single entry of a zip container (an .apk) to a file.
    """

    def extract(self, archive: Path, entry_name: str, destination: Path) -> int:
        try:
            zf = zipfile.ZipFile(archive, "r")
        except (OSError, zipfile.BadZipFile) as e:
            raise ArchiveOpenError(f"There was an error when opening the archive: {e}", path=archive) from e

        with zf:
            try:
                info = zf.getinfo(entry_name)
            except KeyError as e:
                raise EntryNotFoundError(
                    f"There is no {entry_name} file inside the archive", path=archive
                ) from e

            data = bytearray(info.file_size)
            view = memoryview(data)
            read = 0
            try:
                with zf.open(info) as src:
                    while read < info.file_size:
                        n = src.readinto(view[read:])
                        if not n:
                            break
                        read += n
            except (OSError, zipfile.BadZipFile, RuntimeError) as e:
                raise IoError(f"There was an error while reading {entry_name} from the archive: {e}",
                              path=archive) from e

        if read != info.file_size:
            raise IoError(f"{entry_name} is truncated: expected {info.file_size} bytes, got {read}", path=archive)

        payload = bytes(data)
        _write_atomic(destination, payload)
        LOG.debug("Extracted %s (%d bytes) to %s", entry_name, len(payload), destination)
        return len(payload)


def _write_atomic(destination: Path, payload: bytes) -> None:
    tmp_name = None
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{destination.name}.", dir=str(destination.parent))
        with os.fdopen(fd, "wb") as out:
            out.write(payload)
        os.replace(tmp_name, destination)
    except OSError as e:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise IoError(f"There was an error while writing {destination.name}: {e}", path=destination) from e
