"""
Transient sources — scoped, uniquely named probe artifacts.

Usage::

    with temp_source("probe-compile-check.c", source) as artifact:
        obj = artifact.register(f"{artifact.path}.o")
        ...

Every registered path and the source itself are unlinked when the block
exits, whether it returns or raises.  Deletion errors are swallowed:
cleanup is best-effort and must never mask the probe's own result.
"""
import contextlib
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

from toolchain_probe.config import get_settings

PathLike = Union[str, Path]

logger = logging.getLogger(__name__)


@dataclass
class TransientArtifact:
    """A generated source file plus the by-products a probe registers."""

    path: Path
    byproducts: List[Path] = field(default_factory=list)

    def register(self, path: PathLike) -> Path:
        """Mark *path* for removal together with the source."""
        p = Path(path)
        self.byproducts.append(p)
        return p

    def cleanup(self) -> None:
        for p in [*self.byproducts, self.path]:
            with contextlib.suppress(OSError):
                p.unlink()


def _usable_dir(*candidates: Optional[str]) -> Path:
    """First configured directory that exists and is writable, else the system temp dir."""
    for candidate in candidates:
        if not candidate:
            continue
        if os.path.isdir(candidate) and os.access(candidate, os.W_OK | os.X_OK):
            return Path(candidate)
        logger.warning("%s is not a writable directory; ignoring it", candidate)
    return Path(tempfile.gettempdir())


def work_dir() -> Path:
    """Directory transient sources are created in."""
    return _usable_dir(get_settings().PROBE_WORKDIR)


def exe_root() -> Path:
    """Directory isolated executable directories are created under."""
    settings = get_settings()
    return _usable_dir(settings.PROBE_EXEDIR, settings.PROBE_WORKDIR)


def _split_pattern(name_pattern: str) -> Tuple[str, str]:
    stem, dot, ext = name_pattern.rpartition(".")
    if not dot:
        return name_pattern + "-", ""
    return stem + "-", "." + ext


@contextlib.contextmanager
def temp_source(
    name_pattern: str,
    text: str,
    directory: Optional[PathLike] = None,
) -> Iterator[TransientArtifact]:
    """
    Write *text* to a fresh file named after *name_pattern* and yield it.

    ``probe-compile-check.c`` becomes ``probe-compile-check-<random>.c``
    inside *directory* (default: the configured work directory).
    """
    prefix, suffix = _split_pattern(name_pattern)
    target_dir = Path(directory) if directory is not None else work_dir()
    fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=str(target_dir))
    artifact = TransientArtifact(path=Path(name))
    try:
        with os.fdopen(fd, "w") as f:
            f.write(text)
            f.write("\n")
        yield artifact
    finally:
        artifact.cleanup()


@contextlib.contextmanager
def executable_dir(root: Optional[PathLike] = None) -> Iterator[Path]:
    """
    Yield a freshly created private directory for run-check executables.

    Kept apart from the source directory: some systems refuse to execute
    files from world-writable temp locations.
    """
    base = Path(root) if root is not None else exe_root()
    path = Path(tempfile.mkdtemp(prefix="probe-exe-", dir=str(base)))
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
