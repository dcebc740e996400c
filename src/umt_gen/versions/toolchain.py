"""Java toolchain tier required to build for a given Minecraft release."""


def _parse(game_version_id: str) -> tuple[int, int, int]:
    parts = game_version_id.split(".")
    try:
        major = int(parts[0])
        minor = int(parts[1]) if len(parts) > 1 else 0
        patch = int(parts[2]) if len(parts) > 2 else 0
    except ValueError:
        raise ValueError(f"Not a release version id: {game_version_id!r}") from None
    return major, minor, patch


def java_version_for(game_version_id: str) -> int:
    """Java major version for a Minecraft release id.

    Releases up to 1.11.2 natively targeted Java 5/6, but the template's
    JVM downgrader can't emit bytecode below 8, so they build with 8 too.

    >>> java_version_for("1.20.4")
    17
    """
    major, minor, patch = _parse(game_version_id)

    if major < 1 or (major == 1 and minor <= 5):
        return 8  # pre-Classic to 1.5.2, natively Java 5
    if major == 1 and 6 <= minor <= 11:
        return 8  # 1.6.1 to 1.11.2, natively Java 6
    if major == 1 and 12 <= minor <= 16:
        return 8
    if major == 1 and minor == 17:
        return 16
    if major == 1 and 18 <= minor <= 20 and (minor < 20 or patch <= 4):
        return 17
    return 21
