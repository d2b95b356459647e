"""Asset index backed by Unity .meta files.

Every tracked asset in a Unity project has a sibling ``<name>.meta`` file
holding its GUID:

    fileFormatVersion: 2
    guid: 8f1e0c6b2a9d4e3f9a7b6c5d4e3f2a1b

The index maps project-relative paths ("Assets/Prefabs/Player.prefab")
to GUIDs and back. It is the resolver used by the reference search to
decide whether a hit belongs to a tracked asset.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

META_SUFFIX = ".meta"

# Roots that hold assets with .meta files. ProjectSettings files are
# plain serialized files without GUIDs.
ASSET_ROOTS = ("Assets", "Packages")

_GUID_LINE = re.compile(r"^guid:\s*([0-9a-fA-F]{32})\s*$", re.MULTILINE)


@dataclass(frozen=True)
class Asset:
    """A tracked project asset.

    Attributes:
        path: Project-relative path with forward slashes.
        guid: GUID from the asset's .meta file.
    """

    path: str
    guid: str | None = None

    @property
    def name(self) -> str:
        """File name without directories."""
        return self.path.rsplit("/", 1)[-1]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {"path": self.path, "guid": self.guid}


def read_meta_guid(meta_file: Path) -> str | None:
    """Read the GUID from a .meta file.

    Returns:
        Lowercase GUID, or None if the file is unreadable or has no guid line.
    """
    try:
        text = meta_file.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug("Cannot read %s: %s", meta_file, e)
        return None

    match = _GUID_LINE.search(text)
    if not match:
        logger.debug("No guid in %s", meta_file)
        return None
    return match.group(1).lower()


class AssetIndex:
    """Lookup table between asset paths and GUIDs for one project.

    The index is built lazily on first use by walking ASSET_ROOTS for
    .meta files. Lookups never touch the filesystem afterwards, so
    ``resolve`` is a pure function of the index.

    Example:
        index = AssetIndex(Path("~/Projects/Game").expanduser())
        asset = index.resolve("Assets/Prefabs/Player.prefab")
        target = index.asset_for_guid(asset.guid)
    """

    def __init__(self, project_dir: Path):
        self._project_dir = Path(project_dir).resolve()
        self._by_path: dict[str, Asset] | None = None
        self._by_guid: dict[str, Asset] = {}

    @property
    def project_dir(self) -> Path:
        """Absolute project directory."""
        return self._project_dir

    def _ensure_loaded(self) -> dict[str, Asset]:
        if self._by_path is not None:
            return self._by_path

        by_path: dict[str, Asset] = {}
        for root_name in ASSET_ROOTS:
            root = self._project_dir / root_name
            if not root.is_dir():
                continue
            for meta_file in sorted(root.rglob(f"*{META_SUFFIX}")):
                asset_file = meta_file.with_suffix("")
                guid = read_meta_guid(meta_file)
                if guid is None:
                    continue
                rel = asset_file.relative_to(self._project_dir).as_posix()
                asset = Asset(path=rel, guid=guid)
                by_path[rel] = asset
                self._by_guid.setdefault(guid, asset)

        logger.debug("Indexed %d assets under %s", len(by_path), self._project_dir)
        self._by_path = by_path
        return by_path

    def __len__(self) -> int:
        return len(self._ensure_loaded())

    def resolve(self, path: str, line: int | None = None) -> Asset | None:
        """Return the asset at a project-relative path, or None.

        ``line`` is accepted to match the resolver signature used by the
        reference search; assets are file-level so it is not used.
        """
        return self._ensure_loaded().get(path.replace("\\", "/"))

    def asset_for_guid(self, guid: str) -> Asset | None:
        """Return the asset with the given GUID, or None."""
        self._ensure_loaded()
        return self._by_guid.get(guid.strip().lower())

    def guid_for_path(self, path: str) -> str | None:
        """Return the GUID of the asset at ``path``, or None.

        ``path`` may be project-relative or an absolute/relative filesystem
        path inside the project.
        """
        asset = self.resolve(self.to_project_path(path))
        return asset.guid if asset else None

    def to_project_path(self, path: str) -> str:
        """Convert a filesystem path into a project-relative asset path.

        Paths that already look project-relative, or that lie outside the
        project, are returned with forward slashes and otherwise unchanged.
        """
        normalized = path.replace("\\", "/")
        if normalized.split("/", 1)[0] in ASSET_ROOTS:
            return normalized

        candidate = Path(path).expanduser()
        if not candidate.is_absolute():
            candidate = Path.cwd() / candidate
        try:
            return candidate.resolve().relative_to(self._project_dir).as_posix()
        except ValueError:
            return normalized

    def resolve_target(self, text: str) -> str:
        """Turn a search target into the text to search for.

        If ``text`` names a tracked asset (by project path or filesystem
        path) its GUID is returned; anything else is searched literally.
        """
        guid = self.guid_for_path(text)
        if guid:
            logger.debug("Resolved %s to guid %s", text, guid)
            return guid
        return text
