"""Normalizers turning raw upstream feeds into canonical version maps.

Each normalizer accepts the raw payload (bytes, str, or already-decoded JSON)
and never raises for malformed input. A feed that is not the shape we expect
degrades to an empty result so one broken source can't take down the others.
"""

import json
import logging
import re
from collections.abc import Mapping
from functools import cmp_to_key
from typing import Any

from pydantic import ValidationError

from umt_gen.constants import EXCLUDED_GAME_VERSIONS
from umt_gen.versions.schemas import GameVersion, LoaderKind, LoaderVersionEntry

logger = logging.getLogger(__name__)

LoaderMap = dict[str, LoaderVersionEntry]

_FORGE_PROMO_KEY = re.compile(r"^([0-9.]+)-(recommended|latest)$")
_FORGE_PROMO_VALUE = re.compile(r"^[0-9.]+-([0-9.]+)$")
_NUMERIC_VERSION = re.compile(r"^\d+(\.\d+)*$")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class MalformedFeedError(ValueError):
    """Raised internally when a feed payload doesn't have the expected shape."""


def _load(payload: Any) -> Any:
    """Decode a raw payload to JSON if it hasn't been already."""
    if isinstance(payload, (bytes, bytearray)):
        payload = payload.decode("utf-8")
    if isinstance(payload, str):
        return json.loads(payload)
    return payload


def _expect(value: Any, kind: type, what: str) -> Any:
    if not isinstance(value, kind):
        raise MalformedFeedError(f"{what}: expected {kind.__name__}, got {type(value).__name__}")
    return value


# --- Version helpers ---


def parse_game_version(version_id: str) -> tuple[int, ...] | None:
    """Parse a purely numeric dotted id into its segments.

    Snapshot ids like ``24w14a`` or ``1.21-pre1`` can't be ordered against
    releases and return None.
    """
    if not isinstance(version_id, str) or not _NUMERIC_VERSION.match(version_id):
        return None
    return tuple(int(part) for part in version_id.split("."))


def compare_game_versions(a: tuple[int, ...], b: tuple[int, ...]) -> int:
    """Compare parsed versions segment by segment; missing segments are zero."""
    for i in range(max(len(a), len(b))):
        a_val = a[i] if i < len(a) else 0
        b_val = b[i] if i < len(b) else 0
        if a_val != b_val:
            return -1 if a_val < b_val else 1
    return 0


def _leading_int(text: str) -> int | None:
    """Integer prefix of a build segment ("72" -> 72, "0-beta" -> 0, "x" -> None)."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else None


# --- Base game ---


def normalize_game_versions(payload: Any) -> tuple[GameVersion, ...]:
    """Release versions from the launcher manifest, newest first.

    Drops snapshots and other non-release types, and the "1.0" id.
    """
    try:
        data = _expect(_load(payload), dict, "version manifest")
        items = _expect(data["versions"], list, "version manifest versions")
    except (MalformedFeedError, KeyError, ValueError) as e:
        logger.warning("Malformed game version feed: %s", e)
        return ()

    versions = []
    for item in items:
        if not isinstance(item, dict) or item.get("type") != "release":
            continue
        version_id = item.get("id")
        if not isinstance(version_id, str) or version_id in EXCLUDED_GAME_VERSIONS:
            continue
        try:
            versions.append(
                GameVersion(id=version_id, release_timestamp=item.get("releaseTime"))
            )
        except ValidationError as e:
            logger.debug("Skipping game version %r: %s", version_id, e)

    versions.sort(key=lambda v: v.release_timestamp, reverse=True)
    return tuple(versions)


# --- Fabric loader (flat assignment) ---


def normalize_fabric(game_payload: Any, loader_payload: Any) -> LoaderMap:
    """Assign the newest Fabric loader build to every stable game version."""
    try:
        games = _expect(_load(game_payload), list, "fabric game versions")
        loaders = _expect(_load(loader_payload), list, "fabric loader versions")
        latest = loaders[0]["version"] if loaders else None
    except (MalformedFeedError, KeyError, TypeError, ValueError) as e:
        logger.warning("Malformed Fabric feed: %s", e)
        return {}

    if not latest:
        return {}

    fabric: LoaderMap = {}
    for game in games:
        if isinstance(game, dict) and game.get("stable") and isinstance(game.get("version"), str):
            fabric[game["version"]] = LoaderVersionEntry(
                loader=LoaderKind.FABRIC, version=str(latest)
            )
    return fabric


# --- Forge (promotion keys) ---


def normalize_forge(payload: Any) -> LoaderMap:
    """Forge versions from the promotions feed, preferring recommended builds.

    Keys look like ``1.20.4-recommended`` / ``1.20.4-latest`` and values like
    ``1.20.4-49.0.3``. A recommended entry always overwrites; a latest entry
    only fills a gap.
    """
    try:
        data = _expect(_load(payload), dict, "forge promotions")
        promos = _expect(data.get("promos") or {}, dict, "forge promos")
    except (MalformedFeedError, ValueError) as e:
        logger.warning("Malformed Forge feed: %s", e)
        return {}

    forge: LoaderMap = {}
    for key, value in promos.items():
        key_match = _FORGE_PROMO_KEY.match(key)
        if not key_match or not isinstance(value, str):
            continue
        mc_version, channel = key_match.groups()

        value_match = _FORGE_PROMO_VALUE.match(value)
        forge_version = value_match.group(1) if value_match else value

        if channel == "recommended" or mc_version not in forge:
            forge[mc_version] = LoaderVersionEntry(
                loader=LoaderKind.FORGE, version=forge_version
            )
    return forge


# --- NeoForge (dotted builds) ---


def neoforge_game_version(tag: str) -> tuple[str, str] | None:
    """Split a NeoForge tag into (game version, build).

    ``20.4.72`` -> ("1.20.4", "72"); ``21.0.5`` -> ("1.21", "5"). NeoForge
    drops the leading "1." and pads two-segment releases with ".0".
    """
    parts = tag.split(".")
    if len(parts) < 3:
        return None
    if parts[1] == "0":
        mc_version = f"1.{parts[0]}"
    else:
        mc_version = f"1.{parts[0]}.{parts[1]}"
    return mc_version, parts[-1]


def normalize_neoforge(payload: Any) -> LoaderMap:
    """Highest NeoForge build per game version.

    Builds compare by their integer prefix. A build without one never
    replaces, and is never replaced by, another build.
    """
    try:
        data = _expect(_load(payload), dict, "neoforge versions")
        tags = _expect(data.get("versions") or [], list, "neoforge versions list")
    except (MalformedFeedError, ValueError) as e:
        logger.warning("Malformed NeoForge feed: %s", e)
        return {}

    neoforge: LoaderMap = {}
    for tag in tags:
        if not isinstance(tag, str):
            continue
        split = neoforge_game_version(tag)
        if split is None:
            continue
        mc_version, build = split

        current = neoforge.get(mc_version)
        if current is not None:
            new_build = _leading_int(build)
            old_build = _leading_int(current.version)
            if new_build is None or old_build is None or new_build <= old_build:
                continue

        neoforge[mc_version] = LoaderVersionEntry(
            loader=LoaderKind.NEOFORGE,
            version=build,
            full_version=tag if tag != build else None,
        )
    return neoforge


# --- Fabric API (depends on the Fabric map) ---


def normalize_fabric_api(payload: Any, fabric_versions: Mapping[str, Any]) -> LoaderMap:
    """Fabric API version per game version, with fallback to older releases.

    The feed lists API releases newest first, so the first one seen for a game
    version wins. Game versions with Fabric loader support but no API release
    of their own borrow the API version of the nearest older-or-equal game
    version. Never a newer one: an API built for a later game release won't
    load on an earlier one.
    """
    try:
        releases = _expect(_load(payload), list, "fabric api versions")
    except (MalformedFeedError, ValueError) as e:
        logger.warning("Malformed Fabric API feed: %s", e)
        return {}

    api_versions: dict[str, str] = {}
    candidates: list[tuple[tuple[int, ...], str, str]] = []

    for release in releases:
        if not isinstance(release, dict) or release.get("version_type") != "release":
            continue
        version_number = release.get("version_number")
        game_versions = release.get("game_versions") or []
        if not isinstance(version_number, str) or not isinstance(game_versions, list):
            continue

        for game_version in game_versions:
            if not isinstance(game_version, str):
                continue
            api_versions.setdefault(game_version, version_number)
            parsed = parse_game_version(game_version)
            if parsed is not None:
                candidates.append((parsed, game_version, version_number))

    # Newest game version first; stable sort keeps feed order within one
    candidates.sort(key=cmp_to_key(lambda x, y: compare_game_versions(y[0], x[0])))

    fabric_api: LoaderMap = {
        mc_version: LoaderVersionEntry(loader=LoaderKind.FABRIC_API, version=api_version)
        for mc_version, api_version in api_versions.items()
    }

    for mc_version in fabric_versions:
        if mc_version in fabric_api:
            continue
        target = parse_game_version(mc_version)
        if target is None:
            continue
        fallback = next(
            (c for c in candidates if compare_game_versions(c[0], target) <= 0),
            None,
        )
        if fallback is None:
            continue
        _, source_version, api_version = fallback
        fabric_api[mc_version] = LoaderVersionEntry(
            loader=LoaderKind.FABRIC_API, version=api_version
        )
        logger.info(
            "Using fallback Fabric API version %s from %s for Minecraft %s",
            api_version, source_version, mc_version,
        )

    return fabric_api
