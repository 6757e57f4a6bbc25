#!/usr/bin/env python3
"""Run the GradleFix HTTP service locally with auto-reload."""

import uvicorn

from gradlefix.logging import console

HOST = "127.0.0.1"
PORT = 8000


if __name__ == "__main__":
    console.print(f"GradleFix service on http://{HOST}:{PORT} (API docs at /docs, Ctrl+C to stop)")
    uvicorn.run(
        "apps.web.main:app",
        host=HOST,
        port=PORT,
        reload=True,
        reload_dirs=["apps", "gradlefix"],
    )
