"""Impact of a pull request: guess API names from changed files and report."""

from __future__ import annotations

import subprocess
from collections.abc import Iterable
from pathlib import PurePosixPath

from screenbook.analysis.impact import ImpactResult
from screenbook.errors import git_changed_files_error

_API_DIRS = ("/api/", "/apis/")
_SOURCE_SUFFIXES = (".tsx", ".ts", ".jsx", ".js")
_MAX_LISTED_FILES = 20


def changed_files(base_branch: str, cwd: str | None = None) -> list[str]:
    """Files changed on HEAD relative to the merge base with ``base_branch``.

    Raises:
        GitError: If git is unavailable or the diff fails.
    """
    try:
        proc = subprocess.run(
            ["git", "diff", "--name-only", f"{base_branch}...HEAD"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as exc:
        raise git_changed_files_error(base_branch, "git executable not found") from exc
    except subprocess.CalledProcessError as exc:
        raise git_changed_files_error(base_branch, exc.stderr.strip() or None) from exc
    return [line for line in proc.stdout.splitlines() if line.strip()]


def _stem(file: str) -> str:
    name = PurePosixPath(file).name
    for suffix in _SOURCE_SUFFIXES:
        if name.endswith(suffix):
            return name[: -len(suffix)]
    return name


def capitalize(value: str) -> str:
    return value[:1].upper() + value[1:]


def extract_api_names(files: Iterable[str]) -> list[str]:
    """Guess API/service names from file paths, sorted and deduplicated.

    - ``src/api/InvoiceAPI.ts`` -> ``InvoiceAPI``
    - ``src/api/invoice.ts`` -> ``InvoiceAPI``
    - ``src/services/invoice/index.ts`` -> ``InvoiceService``
    - any file whose name contains ``api`` or ``service`` -> its stem
    """
    apis: set[str] = set()

    for file in files:
        name = _stem(file)
        dir_name = PurePosixPath(file).parent.name
        in_api_dir = any(d in file for d in _API_DIRS)
        in_services = "/services/" in file

        if (in_api_dir or in_services) and name.endswith(("API", "Api", "Service")):
            apis.add(name)

        if in_services and name in ("index", dir_name):
            apis.add(f"{capitalize(dir_name)}Service")

        if in_api_dir and not name.endswith(("API", "Api")):
            apis.add(f"{capitalize(name)}API")

        lowered = name.lower()
        if "api" in lowered or "service" in lowered:
            apis.add(name)

    return sorted(apis)


def format_pr_markdown(
    changed: list[str],
    detected_apis: list[str],
    results: list[ImpactResult],
) -> str:
    """Markdown suitable for a PR comment. ``results`` holds only APIs with impact."""
    lines = ["## Screenbook Impact Analysis", ""]

    if not results:
        lines.append("No screen impacts detected from the API changes in this PR.")
        lines.extend(["", "<details>", "<summary>Detected APIs (no screen dependencies)</summary>", ""])
        lines.extend(f"- `{api}`" for api in detected_apis)
        lines.extend(["", "</details>"])
        return "\n".join(lines)

    total = sum(r.total_count for r in results)
    lines.append(
        f"**{total} screen{'s' if total > 1 else ''} affected** by changes to "
        f"{len(results)} API{'s' if len(results) > 1 else ''}"
    )
    lines.append("")

    for result in results:
        lines.extend([f"### {result.api}", ""])
        if result.direct:
            lines.extend(
                [
                    f"**Direct dependencies** ({len(result.direct)}):",
                    "",
                    "| Screen | Route | Owner |",
                    "|--------|-------|-------|",
                ]
            )
            for screen in result.direct:
                owner = ", ".join(screen.owner) if screen.owner else "-"
                lines.append(f"| {screen.id} | `{screen.route}` | {owner} |")
            lines.append("")
        if result.transitive:
            lines.extend([f"**Transitive dependencies** ({len(result.transitive)}):", ""])
            lines.extend(f"- {' → '.join(dep.path)}" for dep in result.transitive)
            lines.append("")

    lines.extend(["<details>", f"<summary>Changed files ({len(changed)})</summary>", ""])
    lines.extend(f"- `{file}`" for file in changed[:_MAX_LISTED_FILES])
    if len(changed) > _MAX_LISTED_FILES:
        lines.append(f"- ... and {len(changed) - _MAX_LISTED_FILES} more")
    lines.extend(["", "</details>"])
    return "\n".join(lines)
