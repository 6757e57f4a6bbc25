"""Plugin declaration parsing and Kotlin DSL rendering."""

import re

from .models import PluginDeclaration

GRADLE_PLUGIN_PREFIX = "org.gradle."
KOTLIN_PLUGIN_PREFIX = "org.jetbrains.kotlin."

# Matches both Groovy `id 'x' version 'y'` and Kotlin `id("x") version "y"`
PLUGIN_DECLARATION = re.compile(
    r"""\bid\s*(?:\(\s*)?(?P<q>["'])(?P<id>[\w.\-]+)(?P=q)(?:\s*\))?"""
    r"""(?:[ \t]+version\s*(?:\(\s*)?(?P<vq>["'])(?P<version>[\w.\-+]+)(?P=vq)(?:\s*\))?)?"""
)

# Core plugins that the Kotlin DSL exposes as accessors on PluginDependenciesSpec
BUILTIN_PLUGIN_IDS = frozenset(
    {
        "antlr",
        "application",
        "assembler",
        "assembler-lang",
        "base",
        "binary-base",
        "build-dashboard",
        "build-init",
        "c",
        "c-lang",
        "checkstyle",
        "clang-compiler",
        "codenarc",
        "coffeescript-base",
        "component-base",
        "cpp",
        "cpp-application",
        "cpp-lang",
        "cpp-library",
        "cpp-unit-test",
        "cunit",
        "cunit-test-suite",
        "distribution",
        "ear",
        "eclipse",
        "eclipse-wtp",
        "envjs",
        "gcc-compiler",
        "google-test",
        "google-test-test-suite",
        "groovy",
        "groovy-base",
        "groovy-gradle-plugin",
        "help-tasks",
        "idea",
        "ivy-publish",
        "jacoco",
        "java",
        "java-base",
        "java-gradle-plugin",
        "java-lang",
        "java-library",
        "java-library-distribution",
        "java-platform",
        "java-test-fixtures",
        "javascript-base",
        "jshint",
        "junit-test-suite",
        "jvm-component",
        "jvm-ecosystem",
        "jvm-resources",
        "language-base",
        "lifecycle-base",
        "maven",
        "maven-publish",
        "microsoft-visual-cpp-compiler",
        "native-component",
        "native-component-model",
        "objective-c",
        "objective-c-lang",
        "objective-cpp",
        "objective-cpp-lang",
        "play",
        "play-application",
        "play-coffeescript",
        "play-ide",
        "play-javascript",
        "pmd",
        "project-report",
        "project-reports",
        "publishing",
        "reporting-base",
        "rhino",
        "scala",
        "scala-base",
        "scala-lang",
        "signing",
        "standard-tool-chains",
        "swift-application",
        "swift-library",
        "swiftpm-export",
        "version-catalog",
        "visual-studio",
        "war",
        "windows-resource-script",
        "windows-resources",
        "wrapper",
        "xcode",
        "xctest",
    }
)


def builtin_name(plugin_id: str) -> str | None:
    """Accessor name of a core Gradle plugin, or None for third-party plugins."""
    name = plugin_id.removeprefix(GRADLE_PLUGIN_PREFIX)
    return name if name in BUILTIN_PLUGIN_IDS else None


def kotlin_module(plugin_id: str) -> str | None:
    """Module passed to ``kotlin("...")`` for Kotlin plugins, else None."""
    if plugin_id.startswith(KOTLIN_PLUGIN_PREFIX):
        module = plugin_id[len(KOTLIN_PLUGIN_PREFIX) :]
        return module or None
    return None


def render_plugin(declaration: PluginDeclaration) -> str:
    """Render a plugin declaration the way the Kotlin DSL spells it."""
    builtin = builtin_name(declaration.id)
    if builtin is not None:
        return f"`{builtin}`" if "-" in builtin else builtin

    module = kotlin_module(declaration.id)
    rendered = f'kotlin("{module}")' if module is not None else f'id("{declaration.id}")'
    if declaration.version is not None:
        rendered += f' version "{declaration.version}"'
    return rendered


def find_plugin_declarations(text: str, start: int = 0, end: int | None = None) -> list[PluginDeclaration]:
    """Find ``id ... version ...`` plugin requests in ``text[start:end]``."""
    if end is None:
        end = len(text)
    return [
        PluginDeclaration(
            id=match.group("id"),
            version=match.group("version") or None,
            start=match.start(),
            end=match.end(),
        )
        for match in PLUGIN_DECLARATION.finditer(text, start, end)
    ]
