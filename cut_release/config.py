"""Package metadata and project configuration loading.

package.json supplies the name and current version of the package being
released. Defaults for the prompts live in TOML, read with tomlkit: either
a dedicated .cut-release.toml or the [tool.cut-release] table of
pyproject.toml.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import tomlkit
from pydantic import ValidationError
from tomlkit.exceptions import TOMLKitError

from .errors import ConfigError, MissingMetadataError
from .models import PackageInfo, ReleaseConfig

PACKAGE_FILE = "package.json"
CONFIG_FILE = ".cut-release.toml"


def load_package_info(root: Path) -> PackageInfo:
    """Read name and version from package.json in root.

    Raises:
        MissingMetadataError: If the file is absent, unreadable, or lacks
            a string name and version.
    """
    path = root / PACKAGE_FILE
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError:
        raise MissingMetadataError(
            f"No {PACKAGE_FILE} exists in current working directory"
        ) from None
    except (OSError, ValueError) as exc:
        raise MissingMetadataError(
            f"Unable to read {PACKAGE_FILE} from current working directory: {exc}"
        ) from exc

    try:
        return PackageInfo.model_validate(data)
    except ValidationError as exc:
        fields = ", ".join(str(err["loc"][0]) if err["loc"] else "<root>" for err in exc.errors())
        raise MissingMetadataError(
            f"Unable to read {PACKAGE_FILE} from current working directory: "
            f"missing or invalid field(s): {fields}"
        ) from exc


def _read_toml(path: Path) -> tomlkit.TOMLDocument:
    try:
        return tomlkit.parse(path.read_text())
    except (OSError, TOMLKitError) as exc:
        raise ConfigError(f"Unable to read {path.name}: {exc}") from exc


def find_config_table(root: Path) -> tuple[str, dict[str, Any]] | None:
    """Locate the raw configuration table and the name of its source.

    .cut-release.toml wins over pyproject.toml. Returns None when neither
    provides any configuration.
    """
    dedicated = root / CONFIG_FILE
    if dedicated.exists():
        return CONFIG_FILE, _read_toml(dedicated).unwrap()

    pyproject = root / "pyproject.toml"
    if pyproject.exists():
        table = _read_toml(pyproject).get("tool", {}).get("cut-release")
        if table is not None:
            return "[tool.cut-release] in pyproject.toml", table.unwrap()
    return None


def load_config(root: Path) -> ReleaseConfig:
    """Load project defaults, falling back to built-in ones.

    Raises:
        ConfigError: On unknown keys or values of the wrong type.
    """
    found = find_config_table(root)
    if found is None:
        return ReleaseConfig()

    source, table = found
    try:
        return ReleaseConfig.model_validate(table)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise ConfigError(f"Invalid configuration in {source}: {problems}") from exc
