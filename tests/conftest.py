"""Shared fixtures for catalog and template tests."""

import pytest

from tests.helpers import build_zip, make_record


@pytest.fixture
def record_1_20_4():
    return make_record(
        "1.20.4",
        released="2023-12-07T12:56:20+00:00",
        fabric="0.15.0",
        fabricApi="0.97.0+1.20.4",
        forge="49.0.3",
        neoforge=("72", "20.4.72"),
    )

@pytest.fixture
def template_zip():
    """A miniature universal mod template, packed the way GitHub does."""
    root = "universal-mod-template-master"
    return build_zip(
        {
            f"{root}/build.gradle": "group = 'com.examplemod'\nminecraft = '1.21.5'\n",
            f"{root}/gradle.properties": "mod_id=examplemod\nmod_name=Example Mod\n",
            f"{root}/common/src/main/java/com/examplemod/ExampleMod.java": (
                "package com.examplemod;\n\n"
                "public class ExampleMod {\n"
                '    public static final String MOD_ID = "examplemod";\n'
                '    public static final String NAME = "Example Mod";\n'
                "}\n"
            ),
            f"{root}/fabric/src/main/java/com/examplemod/fabric/FabricMod.java": (
                "package com.examplemod.fabric;\n"
            ),
            f"{root}/forge/src/main/java/com/examplemod/forge/ForgeMod.java": (
                "package com.examplemod.forge;\n"
            ),
            f"{root}/neoforge/src/main/java/com/examplemod/neoforge/NeoForgeMod.java": (
                "package com.examplemod.neoforge;\n"
            ),
            f"{root}/versionProperties/1.21.5.properties": "minecraft_version=1.21.5\n",
            f"{root}/common/src/main/resources/icon.png": b"\x89PNG\r\n\x1a\n\xff\xfe\x00examplemod",
        },
        directories=(f"{root}/", f"{root}/common/"),
    )
