"""Workspace inspection - which subprojects exist and which env values they lack.

Both results are computed once at the start of a run, before any file is
touched, and treated as read-only afterwards.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from core.config import (
    API_DIR,
    APPS_DIR,
    ENV_TARGET,
    ENV_TEMPLATE,
    OPENAPI_GENERATOR_DIR,
    PACKAGES_DIR,
    WEB_SPA_DIR,
    WEB_SSR_DIR,
)
from core.env_file import missing_keys

log = logging.getLogger("devsetup.detect")


# ---------------------------------------------------------------------------
# Subprojects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AvailableApps:
    """Which optional subprojects are present in the workspace."""

    api: bool = False
    web_spa: bool = False
    web_ssr: bool = False
    openapi_generator: bool = False

    def display_names(self) -> list[str]:
        names = []
        if self.api:
            names.append("API")
        if self.web_spa:
            names.append("Web SPA")
        if self.web_ssr:
            names.append("Web SSR")
        if self.openapi_generator:
            names.append("OpenAPI Generator")
        return names


def _list_subdirs(path: Path) -> set[str]:
    """Names of the direct subdirectories of path; empty if unreadable."""
    try:
        return {item.name for item in path.iterdir() if item.is_dir()}
    except OSError as e:
        log.debug("Treating %s as empty: %s", path, e)
        return set()


def detect_available_apps(workspace: Path) -> AvailableApps:
    """Detect subprojects by directory name under apps/ and packages/."""
    app_dirs = _list_subdirs(workspace / APPS_DIR)
    package_dirs = _list_subdirs(workspace / PACKAGES_DIR)

    apps = AvailableApps(
        api=API_DIR in app_dirs,
        web_spa=WEB_SPA_DIR in app_dirs,
        web_ssr=WEB_SSR_DIR in app_dirs,
        openapi_generator=OPENAPI_GENERATOR_DIR in package_dirs,
    )
    log.debug("Detected %s", apps)
    return apps


# ---------------------------------------------------------------------------
# Env file pairs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TemplatePair:
    """A template env file and the live env file it seeds (workspace-relative)."""

    template: str
    target: str


@dataclass(frozen=True)
class TemplatePairStatus:
    """Snapshot of a target env file taken before any prompting."""

    pair: TemplatePair
    target_exists: bool
    missing_keys: tuple[str, ...]


ROOT_DIR = "."
API_PATH = f"{APPS_DIR}/{API_DIR}"
WEB_SPA_PATH = f"{APPS_DIR}/{WEB_SPA_DIR}"
WEB_SSR_PATH = f"{APPS_DIR}/{WEB_SSR_DIR}"
OPENAPI_GENERATOR_PATH = f"{PACKAGES_DIR}/{OPENAPI_GENERATOR_DIR}"


def _pair_for(directory: str) -> TemplatePair:
    if directory == ROOT_DIR:
        return TemplatePair(template=ENV_TEMPLATE, target=ENV_TARGET)
    return TemplatePair(
        template=f"{directory}/{ENV_TEMPLATE}",
        target=f"{directory}/{ENV_TARGET}",
    )


def template_pairs(apps: AvailableApps) -> list[TemplatePair]:
    """The workspace root pair plus one per detected subproject."""
    directories = [ROOT_DIR]
    if apps.api:
        directories.append(API_PATH)
    if apps.web_spa:
        directories.append(WEB_SPA_PATH)
    if apps.web_ssr:
        directories.append(WEB_SSR_PATH)
    if apps.openapi_generator:
        directories.append(OPENAPI_GENERATOR_PATH)
    return [_pair_for(d) for d in directories]


def target_for(directory: str) -> str:
    """Workspace-relative env target path for a subproject directory."""
    return _pair_for(directory).target


def snapshot_env_files(
    workspace: Path, pairs: list[TemplatePair],
) -> dict[str, TemplatePairStatus]:
    """Compute the status of every pair, keyed by target path."""
    statuses: dict[str, TemplatePairStatus] = {}
    for pair in pairs:
        template_path = workspace / pair.template
        target_path = workspace / pair.target
        statuses[pair.target] = TemplatePairStatus(
            pair=pair,
            target_exists=target_path.exists(),
            missing_keys=tuple(missing_keys(template_path, target_path)),
        )
    return statuses
