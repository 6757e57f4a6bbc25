"""Pytest configuration and fixtures."""


import pytest


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep tests away from the user's installation-wide settings."""
    config_file = tmp_path / "gradlefix-settings.json"
    monkeypatch.setenv("GRADLEFIX_CONFIG_FILE", str(config_file))
    for name in ("GRADLEFIX_DEPENDENCY_FORMAT", "GRADLEFIX_IGNORE_OUTDATED_VERSION", "GRADLEFIX_ALWAYS_CONVERT_GROOVY"):
        monkeypatch.delenv(name, raising=False)
    return config_file


@pytest.fixture
def sample_build_script():
    """Sample build.gradle.kts content for testing."""
    return """plugins {
    id("org.jetbrains.kotlin.jvm") version "1.9.22"
    id("java-library")
}

dependencies {
    implementation("com.squareup.okhttp3:okhttp:4.12.0")
    implementation("io.ktor", "ktor-client-core", "2.3.7")
    compile(group = "com.google.guava", name = "guava", version = "33.0.0-jre")
    implementation(kotlin("stdlib"))
    testImplementation(project(":testing"))
}
"""


@pytest.fixture
def sample_groovy_snippet():
    """Sample Groovy DSL dependencies as copied from a README."""
    return """implementation 'com.squareup.okhttp3:okhttp:4.12.0'
implementation group: 'io.ktor', name: 'ktor-client-core', version: '2.3.7'
"""


@pytest.fixture
def wrapper_project(tmp_path):
    """Create a Gradle project with wrapper properties for testing."""
    wrapper_dir = tmp_path / "gradle" / "wrapper"
    wrapper_dir.mkdir(parents=True)
    (wrapper_dir / "gradle-wrapper.properties").write_text(
        "distributionBase=GRADLE_USER_HOME\n"
        "distributionPath=wrapper/dists\n"
        "distributionUrl=https\\://services.gradle.org/distributions/gradle-8.4-bin.zip\n"
        "zipStoreBase=GRADLE_USER_HOME\n"
        "zipStorePath=wrapper/dists\n"
    )
    return tmp_path
