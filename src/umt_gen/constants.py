"""Shared constants for template generation.

Placeholder literals must match what the upstream template ships. A change
there is silent here: substitution of a missing literal is a no-op, so keep
tests/test_customizer.py in sync with this table.
"""

# --- Template placeholders ---

PLACEHOLDER_PACKAGE = "com.examplemod"
PLACEHOLDER_PACKAGE_PATH = PLACEHOLDER_PACKAGE.replace(".", "/")
PLACEHOLDER_MOD_ID = "examplemod"
PLACEHOLDER_MOD_NAME = "Example Mod"
PLACEHOLDER_MC_VERSION = "1.21.5"

# --- Template layout ---

# Root folder names by download method, in priority order
KNOWN_ROOT_FOLDERS = (
    "universal-mod-template-master",  # GitHub direct download
    "universal-mod-template-main",  # GitHub main branch
    "universal-mod-template",  # Custom zip
)

# Regenerated per selection, never copied from the template
VERSION_PROPERTIES_DIR = "versionProperties"

TEMPLATE_FILENAME = "universal-mod-template.zip"

# --- Game versions ---

# Present in the launcher manifest but not a buildable target
EXCLUDED_GAME_VERSIONS = frozenset({"1.0"})

# --- Blob names (prefixed with Settings.blob_prefix) ---

BLOB_MINECRAFT_VERSIONS = "minecraft-versions.json"
BLOB_FABRIC_VERSIONS = "fabric-versions.json"
BLOB_FABRIC_API_VERSIONS = "fabric-api-versions.json"
BLOB_FORGE_VERSIONS = "forge-versions.json"
BLOB_NEOFORGE_VERSIONS = "neoforge-versions.json"
BLOB_COMPATIBLE_VERSIONS = "compatible-versions.json"
BLOB_TEMPLATE = "template.zip"
