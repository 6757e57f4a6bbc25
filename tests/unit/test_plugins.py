"""Tests for plugin declarations."""

import pytest

from gradlefix.models import PluginDeclaration
from gradlefix.plugins import builtin_name, find_plugin_declarations, kotlin_module, render_plugin


class TestRenderPlugin:
    """Test Kotlin DSL rendering of plugin requests."""

    @pytest.mark.parametrize(
        "plugin_id, expected",
        [
            ("java", "java"),
            ("org.gradle.java", "java"),
            ("java-library", "`java-library`"),
            ("maven-publish", "`maven-publish`"),
            ("org.gradle.application", "application"),
            ("org.gradle.java-library", "`java-library`"),
        ],
    )
    def test_builtin(self, plugin_id, expected):
        """Built-in plugins render as accessors and never carry a version."""
        assert render_plugin(PluginDeclaration(plugin_id)) == expected
        assert render_plugin(PluginDeclaration(plugin_id, "1.0")) == expected

    def test_kotlin(self):
        assert render_plugin(PluginDeclaration("org.jetbrains.kotlin.jvm", "1.9.22")) == 'kotlin("jvm") version "1.9.22"'
        assert render_plugin(PluginDeclaration("org.jetbrains.kotlin.plugin.serialization")) == (
            'kotlin("plugin.serialization")'
        )

    def test_third_party(self):
        declaration = PluginDeclaration("com.github.johnrengelman.shadow", "8.1.1")
        assert render_plugin(declaration) == 'id("com.github.johnrengelman.shadow") version "8.1.1"'
        assert render_plugin(PluginDeclaration("com.example.plugin")) == 'id("com.example.plugin")'

    def test_lookup_helpers(self):
        assert builtin_name("org.gradle.maven-publish") == "maven-publish"
        assert builtin_name("com.example.java") is None
        assert kotlin_module("org.jetbrains.kotlin.android") == "android"
        assert kotlin_module("org.jetbrains.kotlin.") is None
        assert kotlin_module("com.example") is None


class TestFindPluginDeclarations:
    """Test finding plugin requests in Groovy and Kotlin text."""

    def test_groovy(self):
        text = "plugins {\n    id 'java'\n    id 'org.jetbrains.kotlin.jvm' version '1.9.22'\n}\n"
        declarations = find_plugin_declarations(text)
        assert [(d.id, d.version) for d in declarations] == [("java", None), ("org.jetbrains.kotlin.jvm", "1.9.22")]
        assert text[declarations[1].start : declarations[1].end] == "id 'org.jetbrains.kotlin.jvm' version '1.9.22'"

    def test_kotlin(self):
        text = 'id("com.example.plugin") version "2.0"\n'
        declaration = find_plugin_declarations(text)[0]
        assert declaration.version == "2.0"
        assert text[declaration.start : declaration.end] == text.strip()
