"""OpenDocument package access: read named entries, commit a rewritten copy."""
from __future__ import annotations

import os
import shutil
import tempfile
import time
import zipfile
import zlib
from pathlib import Path
from typing import List, Mapping, Optional, Union

from odf_restyler.errors import ContainerCorrupt, ContainerNotFound, EntryNotFound, OdfRestylerError, WriteError
from odf_restyler.utils.logger import get_logger

LOGGER = get_logger(__name__)

PathLike = Union[str, os.PathLike]

MIMETYPE_PATH = "mimetype"
CONTENT_XML_PATH = "content.xml"
STYLES_XML_PATH = "styles.xml"
META_XML_PATH = "meta.xml"
SETTINGS_XML_PATH = "settings.xml"
MANIFEST_XML_PATH = "META-INF/manifest.xml"


class OdfPackage:
    """Read-only handle on a ZIP-format OpenDocument package.

    The handle keeps the archive open until :meth:`close`; use it as a
    context manager so the file is released on every exit path.
    """

    def __init__(self, path: Path, archive: zipfile.ZipFile) -> None:
        self.path = path
        self._archive: Optional[zipfile.ZipFile] = archive

    @classmethod
    def open(cls, path: PathLike) -> "OdfPackage":
        package_path = Path(path)
        if not package_path.is_file():
            raise ContainerNotFound(f"Package not found: {package_path}")
        try:
            archive = zipfile.ZipFile(package_path)
        except (zipfile.BadZipFile, zlib.error) as exc:
            raise ContainerCorrupt(f"Not a readable ZIP archive: {package_path}") from exc
        LOGGER.debug("Opened %s with %d entries", package_path.name, len(archive.infolist()))
        return cls(package_path, archive)

    def __enter__(self) -> "OdfPackage":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._archive is not None:
            self._archive.close()
            self._archive = None

    # ------------------------------------------------------------------
    # Reading
    @property
    def archive(self) -> zipfile.ZipFile:
        if self._archive is None:
            raise ValueError(f"Package {self.path} is closed")
        return self._archive

    def names(self) -> List[str]:
        """Entry names in archive order."""
        return [info.filename for info in self.archive.infolist()]

    def has_entry(self, name: str) -> bool:
        try:
            self.archive.getinfo(name)
        except KeyError:
            return False
        return True

    def read_entry(self, name: str) -> bytes:
        try:
            info = self.archive.getinfo(name)
        except KeyError:
            raise EntryNotFound(name) from None
        return self._read(info)

    def read_optional(self, name: str) -> Optional[bytes]:
        if not self.has_entry(name):
            LOGGER.debug("Optional part %s missing from %s", name, self.path.name)
            return None
        return self.read_entry(name)

    @property
    def mimetype(self) -> Optional[str]:
        data = self.read_optional(MIMETYPE_PATH)
        return data.decode("ascii", errors="replace").strip() if data is not None else None

    def _read(self, info: zipfile.ZipInfo) -> bytes:
        try:
            return self.archive.read(info)
        except (zipfile.BadZipFile, zlib.error, EOFError) as exc:
            raise ContainerCorrupt(f"Cannot read {info.filename} from {self.path}: {exc}") from exc

    # ------------------------------------------------------------------
    # Writing
    def commit(self, replacements: Mapping[str, bytes], output_path: PathLike) -> Path:
        """Write a copy of the package with ``replacements`` substituted.

        Every other entry is copied with its original name, position,
        compression method, timestamp and attributes. Entries named in
        ``replacements`` but absent from the source are appended. The copy is
        assembled in a temporary file next to ``output_path`` and moved into
        place only once it is complete.
        """
        target = Path(output_path)
        directory = target.parent if str(target.parent) else Path(".")
        try:
            fd, temp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=directory)
        except OSError as exc:
            raise WriteError(f"Cannot create a temporary file in {directory}: {exc}") from exc

        temp_path = Path(temp_name)
        try:
            with os.fdopen(fd, "wb") as handle:
                self._write_archive(handle, replacements)
            shutil.copymode(target if target.exists() else self.path, temp_path)
            os.replace(temp_path, target)
        except OSError as exc:
            _discard(temp_path)
            if isinstance(exc, OdfRestylerError):
                raise
            raise WriteError(f"Cannot write package {target}: {exc}") from exc
        except BaseException:
            _discard(temp_path)
            raise

        LOGGER.debug("Committed %s (%d replaced entries)", target.name, len(replacements))
        return target

    def _write_archive(self, handle, replacements: Mapping[str, bytes]) -> None:
        copied = set()
        with zipfile.ZipFile(handle, "w") as output:
            for info in self.archive.infolist():
                if info.filename in replacements:
                    data = replacements[info.filename]
                else:
                    data = self._read(info)
                output.writestr(_clone_info(info), data)
                copied.add(info.filename)
            for name, data in replacements.items():
                if name in copied:
                    continue
                info = zipfile.ZipInfo(name, date_time=time.localtime()[:6])
                info.compress_type = zipfile.ZIP_DEFLATED
                output.writestr(info, data)


def _clone_info(info: zipfile.ZipInfo) -> zipfile.ZipInfo:
    """Fresh ZipInfo with the source entry's metadata.

    ``ZipFile.writestr`` fills in offsets and sizes on the object it is given,
    so the source archive's own records must not be reused.
    """
    clone = zipfile.ZipInfo(info.filename, date_time=info.date_time)
    clone.compress_type = info.compress_type
    clone.comment = info.comment
    clone.create_system = info.create_system
    clone.external_attr = info.external_attr
    clone.internal_attr = info.internal_attr
    return clone


def _discard(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
