"""
Manifest — package.json access.

The synchronizer only reads the manifest; dependency fields are changed by
the package manager. ``write_manifest`` exists for ``depwatch init``, which
adds scripts.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from ..errors import ManifestReadError, ManifestWriteError


MANIFEST_FILE = "package.json"


@dataclass
class Manifest:
    """Declared dependencies of a project (name -> version range)."""
    path: Path
    dependencies: Dict[str, str] = field(default_factory=dict)
    dev_dependencies: Dict[str, str] = field(default_factory=dict)
    scripts: Dict[str, str] = field(default_factory=dict)
    data: Dict[str, Any] = field(default_factory=dict)

    def declares(self, package: str, include_dev: bool = False) -> bool:
        if package in self.dependencies:
            return True
        return include_dev and package in self.dev_dependencies


def _section(data: Dict[str, Any], key: str, path: Path) -> Dict[str, str]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ManifestReadError(f"{path}: '{key}' must be an object")
    return dict(value)


def read_manifest(path: Path) -> Manifest:
    """
    Read package.json.

    Raises:
        ManifestReadError: Missing file, invalid JSON, or unexpected shape
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ManifestReadError(f"{path}: not found") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestReadError(f"{path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ManifestReadError(f"{path}: invalid JSON ({e})") from e

    if not isinstance(data, dict):
        raise ManifestReadError(f"{path}: expected a JSON object")

    return Manifest(
        path=path,
        dependencies=_section(data, "dependencies", path),
        dev_dependencies=_section(data, "devDependencies", path),
        scripts=_section(data, "scripts", path),
        data=data,
    )


def write_manifest(manifest: Manifest) -> None:
    """
    Write the manifest's raw data back, npm style (2-space indent).

    Raises:
        ManifestWriteError: If the file cannot be written
    """
    data = dict(manifest.data)
    if manifest.scripts or "scripts" in data:
        data["scripts"] = manifest.scripts
    try:
        with open(manifest.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
    except OSError as e:
        raise ManifestWriteError(f"{manifest.path}: {e}") from e
    manifest.data = data
