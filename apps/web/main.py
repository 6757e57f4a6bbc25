"""FastAPI web application for GradleFix."""

from typing import Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from gradlefix.detect import identify
from gradlefix.errors import GradleFixError, InvalidFormat
from gradlefix.formats import DependencyFormat, get_format
from gradlefix.inspections import fix_all, inspect
from gradlefix.models import Expression
from gradlefix.outdated import classify_outdatedness
from gradlefix.paste import convert_groovy, convert_kotlin
from gradlefix.releases import LatestVersionContext, ReleaseFeed
from gradlefix.settings import load_application_settings
from gradlefix.version import parse_version

app = FastAPI(
    title="GradleFix",
    description="Normalize Gradle Kotlin DSL dependency declarations",
    version="0.1.0",
)

latest_context = LatestVersionContext()


class ConvertRequest(BaseModel):
    """Request model for converting a pasted snippet."""
    content: str
    dialect: Literal["groovy", "kotlin", "auto"] = "auto"
    dependency_format: str = "notation"


class DependencyModel(BaseModel):
    group: str
    name: str
    version: Optional[str] = None


class ConvertResponse(BaseModel):
    """Response model for snippet conversion."""
    original_content: str
    converted_content: str
    dialect: str
    has_changes: bool
    dependencies: list[DependencyModel]


class ScriptRequest(BaseModel):
    """Request model for inspecting or fixing a build script."""
    content: str
    dependency_format: str = "notation"


class ProblemModel(BaseModel):
    code: str
    message: str
    level: str
    start: int
    end: int
    fixable: bool


class CheckResponse(BaseModel):
    problems: list[ProblemModel]


class FixResponse(BaseModel):
    original_content: str
    fixed_content: str
    has_changes: bool
    problems: list[ProblemModel]


class OutdatednessRequest(BaseModel):
    installed: str
    latest: Optional[str] = None


class OutdatednessResponse(BaseModel):
    installed: str
    latest: str
    severity: str
    difference: str
    outdated: bool


class LatestResponse(BaseModel):
    version: str
    refreshed_at: Optional[str] = None


def _target_format(name: str) -> DependencyFormat:
    try:
        fmt = get_format(name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not fmt.generatable:
        raise HTTPException(status_code=400, detail=f"{fmt.human_name} format cannot be generated")
    return fmt


def _source(expression: Expression) -> str:
    """Plain value of a literal, source text of anything else."""
    return expression.value if expression.value is not None else expression.text


def _error_response(e: GradleFixError) -> HTTPException:
    status_code = 422 if isinstance(e, InvalidFormat) else 400
    return HTTPException(status_code=status_code, detail=str(e))


def _problem_models(problems) -> list[ProblemModel]:
    return [
        ProblemModel(
            code=problem.code,
            message=problem.message,
            level=problem.level.value,
            start=problem.start,
            end=problem.end,
            fixable=problem.fix is not None,
        )
        for problem in problems
    ]


@app.get("/", response_class=HTMLResponse)
async def home():
    """Serve the main application page."""
    return get_index_html()


@app.post("/api/convert", response_model=ConvertResponse)
async def convert_snippet(request: ConvertRequest):
    """Convert a pasted Groovy or Kotlin snippet into the requested format."""
    try:
        if not request.content.strip():
            raise HTTPException(status_code=400, detail="No content provided")

        target = _target_format(request.dependency_format)
        dialect = identify(request.content) if request.dialect == "auto" else request.dialect
        if dialect == "groovy":
            result = convert_groovy(request.content, target)
        else:
            result = convert_kotlin(request.content, target)

        return ConvertResponse(
            original_content=request.content,
            converted_content=result.text,
            dialect=dialect,
            has_changes=result.changed,
            dependencies=[
                DependencyModel(
                    group=_source(dependency.group),
                    name=_source(dependency.name),
                    version=_source(dependency.version) if dependency.version is not None else None,
                )
                for dependency in result.dependencies
            ],
        )

    except HTTPException:
        # Re-raise HTTP exceptions (don't convert to 500)
        raise
    except GradleFixError as e:
        raise _error_response(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error converting snippet: {str(e)}")


@app.post("/api/check", response_model=CheckResponse)
async def check_script(request: ScriptRequest):
    """Inspect a Kotlin DSL build script."""
    try:
        problems = inspect(request.content, _target_format(request.dependency_format))
        return CheckResponse(problems=_problem_models(problems))

    except HTTPException:
        raise
    except GradleFixError as e:
        raise _error_response(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error inspecting script: {str(e)}")


@app.post("/api/fix", response_model=FixResponse)
async def fix_script(request: ScriptRequest):
    """Apply every available quick fix to a Kotlin DSL build script."""
    try:
        problems = inspect(request.content, _target_format(request.dependency_format))
        fixed = fix_all(request.content, problems)
        return FixResponse(
            original_content=request.content,
            fixed_content=fixed,
            has_changes=fixed != request.content,
            problems=_problem_models(problems),
        )

    except HTTPException:
        raise
    except GradleFixError as e:
        raise _error_response(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fixing script: {str(e)}")


@app.post("/api/outdatedness", response_model=OutdatednessResponse)
async def outdatedness(request: OutdatednessRequest):
    """Classify an installed version against the given or the latest known version."""
    try:
        installed = parse_version(request.installed)
        if request.latest is not None:
            latest = parse_version(request.latest)
        elif latest_context.latest is not None:
            latest = latest_context.latest
        else:
            raise HTTPException(status_code=503, detail="Latest Gradle version is not available yet")

        report = classify_outdatedness(installed, latest)
        return OutdatednessResponse(
            installed=report.installed,
            latest=report.latest,
            severity=report.severity.name.lower(),
            difference=report.difference.value,
            outdated=report.is_outdated,
        )

    except HTTPException:
        raise
    except GradleFixError as e:
        raise _error_response(e)


@app.get("/api/latest", response_model=LatestResponse)
async def latest_version():
    """Return the latest stable Gradle version known to this process."""
    if latest_context.latest is None:
        raise HTTPException(status_code=503, detail="Latest Gradle version is not available yet")
    return _latest_response()


@app.post("/api/latest/refresh", response_model=LatestResponse)
async def refresh_latest_version():
    """Fetch the latest stable Gradle version from the release feed."""
    try:
        application = load_application_settings()
        await latest_context.refresh(ReleaseFeed(application.feed_url, application.feed_timeout))
        return _latest_response()

    except GradleFixError as e:
        raise HTTPException(status_code=502, detail=f"Could not refresh latest version: {str(e)}")


def _latest_response() -> LatestResponse:
    refreshed_at = latest_context.refreshed_at
    return LatestResponse(
        version=str(latest_context.latest),
        refreshed_at=refreshed_at.isoformat() if refreshed_at else None,
    )


def get_index_html() -> str:
    """Return the main HTML page."""
    return """
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="UTF-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        <title>GradleFix - Dependency Converter</title>
        <link href="https://cdn.jsdelivr.net/npm/bootstrap@5.3.0/dist/css/bootstrap.min.css" rel="stylesheet">
    </head>
    <body>
        <div class="container py-4">
            <div class="text-center mb-4">
                <h1 class="display-5 fw-bold text-primary">GradleFix</h1>
                <p class="lead text-muted">Paste Groovy or Kotlin dependencies and get consistent Kotlin DSL</p>
            </div>
            <div class="row">
                <div class="col-lg-6 mb-3">
                    <textarea id="snippet" class="form-control font-monospace" rows="14"
                        placeholder="implementation 'com.squareup.okhttp3:okhttp:4.12.0'"></textarea>
                    <div class="d-flex gap-2 mt-3">
                        <select id="format" class="form-select">
                            <option value="notation">Notation</option>
                            <option value="positional">Positional</option>
                            <option value="named">Named</option>
                        </select>
                        <button id="convertBtn" class="btn btn-primary">Convert</button>
                    </div>
                </div>
                <div class="col-lg-6 mb-3">
                    <pre id="output" class="bg-light p-3 rounded font-monospace small h-100"></pre>
                </div>
            </div>
        </div>
        <script>
            document.getElementById('convertBtn').addEventListener('click', async () => {
                const output = document.getElementById('output');
                const response = await fetch('/api/convert', {
                    method: 'POST',
                    headers: {'Content-Type': 'application/json'},
                    body: JSON.stringify({
                        content: document.getElementById('snippet').value,
                        dependency_format: document.getElementById('format').value,
                    }),
                });
                const data = await response.json();
                output.textContent = response.ok ? data.converted_content : 'Error: ' + data.detail;
            });
        </script>
    </body>
    </html>
    """
