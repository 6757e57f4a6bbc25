"""Build script dialect detection."""

import re


def identify(content: str, filename: str | None = None) -> str:
    """Detect the build script dialect from content and filename hints.

    Args:
        content: The build script or snippet content
        filename: Optional filename for additional context

    Returns:
        Detected dialect: 'kotlin', 'groovy', or 'unknown'
    """
    # Filename-based detection (takes precedence)
    if filename:
        if filename.endswith(".gradle.kts"):
            return "kotlin"
        if filename.endswith(".gradle"):
            return "groovy"

    # Content-based detection
    # Kotlin DSL patterns
    kotlin_patterns = [
        r'^\s*\w+\(\s*"[^"]*"',  # implementation("group:name:version")
        r"""\bid\(\s*"[\w.\-]+"\s*\)""",  # id("plugin")
        r'\b(?:group|name|version)\s*=\s*"',  # named arguments
        r"^\s*(?:val|var)\s+\w+",  # local declarations
    ]

    for pattern in kotlin_patterns:
        if re.search(pattern, content, re.MULTILINE):
            return "kotlin"

    # Groovy DSL patterns
    groovy_patterns = [
        r"""^\s*\w+\s+['"][^'"\s]+:[^'"\s]+""",  # implementation 'group:name:version'
        r"""\bid\s+['"][\w.\-]+['"]""",  # id 'plugin'
        r"""\bgroup\s*:\s*['"]""",  # group: 'x', name: 'y'
        r"^\s*def\s+\w+",  # local declarations
    ]

    for pattern in groovy_patterns:
        if re.search(pattern, content, re.MULTILINE):
            return "groovy"

    return "unknown"
