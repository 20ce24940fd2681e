"""Unified storage abstraction using fsspec for local and GCS access."""

from pathlib import Path

import fsspec


class StorageBackend:
    """Filesystem abstraction that provides identical API for local and GCS paths.

    Uses fsspec internally.  Filesystem instances are lazily created and
    cached per protocol (``file`` for local, ``gcs`` for Cloud Storage).
    Point sources are read and curve files written through this class.
    """

    def __init__(self) -> None:
        self._filesystems: dict[str, fsspec.AbstractFileSystem] = {}

    def _get_fs(self, path: str) -> tuple[fsspec.AbstractFileSystem, str]:
        """Resolve the fsspec filesystem and normalised path for *path*.

        GCS paths (``gs://...``) use the ``gcs`` protocol.  Everything else
        is treated as a local file and resolved to an absolute path.
        """
        if path.startswith("gs://"):
            protocol = "gcs"
            norm_path = path
        else:
            protocol = "file"
            norm_path = str(Path(path).resolve())

        if protocol not in self._filesystems:
            self._filesystems[protocol] = fsspec.filesystem(protocol)

        return self._filesystems[protocol], norm_path

    def isdir(self, path: str) -> bool:
        """Return ``True`` if *path* is an existing directory."""
        fs, norm_path = self._get_fs(path)
        return fs.isdir(norm_path)

    def exists(self, path: str) -> bool:
        """Return ``True`` if *path* exists on the resolved filesystem."""
        fs, norm_path = self._get_fs(path)
        return fs.exists(norm_path)

    def move(self, src: str, dst: str) -> None:
        """Rename *src* to *dst*, replacing an existing file at *dst*."""
        fs, norm_src = self._get_fs(src)
        _, norm_dst = self._get_fs(dst)
        fs.mv(norm_src, norm_dst)

    def remove(self, path: str) -> None:
        fs, norm_path = self._get_fs(path)
        fs.rm(norm_path)

    def open(self, path: str, mode: str = "rb", **kwargs):
        """Return an open file-like object for *path*.

        Text modes accept ``encoding``/``newline`` keyword arguments.  Local
        parent directories are created when opening for writing.
        """
        fs, norm_path = self._get_fs(path)
        if "w" in mode and not path.startswith("gs://"):
            Path(norm_path).parent.mkdir(parents=True, exist_ok=True)
        return fs.open(norm_path, mode, **kwargs)
