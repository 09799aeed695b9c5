"""Rename workspace packages to the user's project scope.

Rewrites the `name` of each package.json and moves dependencies under the
template's organization scope to the new one, so workspace cross-references
keep resolving after the rename.
"""

import json
import logging
from pathlib import Path
from typing import Any

from bootstrap.detect import AvailableApps
from core.config import (
    API_DIR,
    APPS_DIR,
    DOCUMENTATION_DIR,
    MANIFEST_FILE,
    OPENAPI_GENERATOR_DIR,
    PACKAGES_DIR,
    UI_DIR,
    WEB_SPA_DIR,
    WEB_SSR_DIR,
)

log = logging.getLogger("devsetup.rename")

DEPENDENCY_SECTIONS = ("dependencies", "devDependencies", "peerDependencies")


def _load_manifest(path: Path) -> dict[str, Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    return data


def _save_manifest(path: Path, manifest: dict[str, Any]) -> None:
    path.write_text(json.dumps(manifest, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def rescope_dependencies(
    deps: dict[str, str], old_scope: str, new_scope: str,
) -> dict[str, str]:
    """Move `old_scope/*` keys to `new_scope/*`, keeping order and versions."""
    prefix = f"{old_scope}/"
    renamed: dict[str, str] = {}
    for key, version in deps.items():
        if key.startswith(prefix):
            key = f"{new_scope}/{key[len(prefix):]}"
        renamed[key] = version
    return renamed


def update_manifest(
    path: Path,
    new_name: str,
    old_scope: str | None = None,
    new_scope: str | None = None,
) -> bool:
    """Set the manifest name and optionally rescope its dependencies.

    Returns False if the manifest does not exist. Malformed JSON, or a
    top level that is not an object, raises ValueError.
    """
    if not path.exists():
        return False

    manifest = _load_manifest(path)
    manifest["name"] = new_name
    if old_scope and new_scope:
        for section in DEPENDENCY_SECTIONS:
            deps = manifest.get(section)
            if isinstance(deps, dict):
                manifest[section] = rescope_dependencies(deps, old_scope, new_scope)

    _save_manifest(path, manifest)
    log.debug("Renamed %s to %s", path, new_name)
    return True


def _manifests_to_rename(apps: AvailableApps) -> list[tuple[str, str]]:
    """(parent dir, package dir) of each subproject manifest to rename."""
    candidates = [
        (APPS_DIR, API_DIR, apps.api),
        (APPS_DIR, WEB_SPA_DIR, apps.web_spa),
        (APPS_DIR, WEB_SSR_DIR, apps.web_ssr),
        (APPS_DIR, DOCUMENTATION_DIR, True),
        (PACKAGES_DIR, UI_DIR, True),
        (PACKAGES_DIR, OPENAPI_GENERATOR_DIR, apps.openapi_generator),
    ]
    return [(parent, name) for parent, name, wanted in candidates if wanted]


def rename_packages(
    workspace: Path, project_name: str, apps: AvailableApps, old_scope: str,
) -> list[str]:
    """Rename the root and subproject manifests. Returns updated relative paths."""
    new_scope = f"@{project_name}"
    updated = []

    root_manifest = workspace / MANIFEST_FILE
    if update_manifest(root_manifest, project_name):
        updated.append(MANIFEST_FILE)

    for parent, name in _manifests_to_rename(apps):
        relative = f"{parent}/{name}/{MANIFEST_FILE}"
        if update_manifest(workspace / relative, f"{new_scope}/{name}", old_scope, new_scope):
            updated.append(relative)

    return updated
