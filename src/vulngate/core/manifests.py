"""Manifest discovery on disk and inside jar archives.

Finds every pom.xml under a project root, first as loose files and then as
entries of *.jar archives, and reads their content. Archives are read
in-process with zipfile.

Provides:
- find_pom_files: Sorted pom.xml paths under a root
- find_archives: Sorted *.jar paths under a root
- list_archive_poms: pom.xml entry names inside one archive
- read_archive_entry: Text content of one archive entry
- gather_manifests: All manifests, filesystem first, then archives
- split_primary: Primary manifest and the supplementary rest
"""

import zipfile
import zlib
from pathlib import Path

import structlog

from vulngate.core.errors import (
    ArchiveEntryNotFoundError,
    ArchiveNotFoundError,
    ArchiveReadError,
    FilesystemAccessError,
    NoManifestsFound,
)
from vulngate.core.models import Manifest

logger = structlog.get_logger()

POM_FILE_NAME = "pom.xml"
ARCHIVE_PATTERN = "*.jar"


def _check_root(root: Path) -> None:
    if not root.exists():
        raise FilesystemAccessError(f"Project root does not exist: {root}")
    if not root.is_dir():
        raise FilesystemAccessError(f"Project root is not a directory: {root}")


def _sorted_files(root: Path, pattern: str) -> list[Path]:
    # rglob also descends into hidden directories
    try:
        return sorted(hit for hit in root.rglob(pattern) if hit.is_file())
    except OSError as e:
        raise FilesystemAccessError(f"Failed to search {root}: {e}") from e


def find_pom_files(root: Path) -> list[Path]:
    """Find all files named exactly pom.xml under root, sorted by path.

    Args:
        root: Project root directory

    Returns:
        Sorted list of pom.xml paths

    Raises:
        FilesystemAccessError: If root is missing or cannot be searched
    """
    _check_root(root)
    logger.debug("searching_poms", root=str(root))
    poms = _sorted_files(root, POM_FILE_NAME)
    logger.debug("poms_found", count=len(poms), poms=[str(p) for p in poms])
    return poms


def find_archives(root: Path) -> list[Path]:
    """Find all *.jar files under root, sorted by path."""
    _check_root(root)
    logger.debug("searching_archives", root=str(root))
    archives = _sorted_files(root, ARCHIVE_PATTERN)
    logger.debug("archives_found", count=len(archives), archives=[str(a) for a in archives])
    return archives


def _open_archive(archive: Path) -> zipfile.ZipFile:
    if not archive.is_file():
        raise ArchiveNotFoundError(f"Archive not found: {archive}")
    try:
        return zipfile.ZipFile(archive)
    except zipfile.BadZipFile as e:
        raise ArchiveReadError(f"Not a valid zip archive: {archive}: {e}") from e
    except OSError as e:
        raise ArchiveReadError(f"Failed to open archive {archive}: {e}") from e


def list_archive_poms(archive: Path) -> list[str]:
    """List archive entries whose path contains pom.xml.

    Directory entries are skipped; order follows the archive's own listing.

    Raises:
        ArchiveNotFoundError: If the archive does not exist
        ArchiveReadError: If the archive is not a readable zip file
    """
    with _open_archive(archive) as zf:
        entries = [
            name for name in zf.namelist()
            if POM_FILE_NAME in name and not name.endswith("/")
        ]
    if entries:
        logger.debug("archive_poms_found", archive=str(archive), count=len(entries), entries=entries)
    return entries


def read_archive_entry(archive: Path, entry: str) -> str:
    """Extract one archive entry as text.

    Undecodable bytes are replaced; content is passed through unvalidated.

    Raises:
        ArchiveNotFoundError: If the archive does not exist
        ArchiveEntryNotFoundError: If the entry is not in the archive
        ArchiveReadError: If the archive or entry cannot be read
    """
    with _open_archive(archive) as zf:
        try:
            data = zf.read(entry)
        except KeyError as e:
            raise ArchiveEntryNotFoundError(f"Entry {entry} not found in {archive}") from e
        except (zipfile.BadZipFile, zlib.error, EOFError, OSError) as e:
            raise ArchiveReadError(f"Failed to read {entry} from {archive}: {e}") from e
        except (RuntimeError, NotImplementedError) as e:
            # encrypted entries and unsupported compression methods
            raise ArchiveReadError(f"Cannot extract {entry} from {archive}: {e}") from e
    return data.decode("utf-8", errors="replace")


def _read_pom(path: Path) -> Manifest:
    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise FilesystemAccessError(f"Failed to read {path}: {e}") from e
    return Manifest(content=content, origin=str(path))


def gather_manifests(root: Path | str) -> list[Manifest]:
    """Collect every manifest under root.

    Filesystem pom.xml files come first (sorted by path), followed by the
    pom.xml entries of each jar (archives sorted by path, entries in archive
    order). An empty result is not an error here; the caller decides.

    Args:
        root: Project root directory

    Returns:
        Ordered list of manifests

    Raises:
        FilesystemAccessError: If root is missing or anything cannot be read
    """
    root = Path(root)
    manifests = [_read_pom(path) for path in find_pom_files(root)]

    for archive in find_archives(root):
        for entry in list_archive_poms(archive):
            manifests.append(
                Manifest(
                    content=read_archive_entry(archive, entry),
                    origin=f"{archive}!/{entry}",
                )
            )

    logger.info("manifests_found", root=str(root), count=len(manifests))
    return manifests


def split_primary(manifests: list[Manifest]) -> tuple[Manifest, list[Manifest]]:
    """Split manifests into the primary target and supplementary rest.

    The first manifest is primary whichever search produced it.

    Raises:
        NoManifestsFound: If manifests is empty
    """
    if not manifests:
        raise NoManifestsFound("No pom.xml manifests found")
    return manifests[0], list(manifests[1:])
