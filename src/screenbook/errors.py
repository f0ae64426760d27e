"""Error types and the catalog of user-facing error messages.

Analysis functions never raise for defects in the screen graph; these errors
belong to the outer layers (config, loading, git, CLI policy). Each carries a
title plus optional details, a suggestion and an example so the CLI can render
actionable output.
"""

from __future__ import annotations


class ScreenbookError(Exception):
    """Base class for errors reported to the CLI user."""

    def __init__(
        self,
        title: str,
        message: str | None = None,
        suggestion: str | None = None,
        example: str | None = None,
    ):
        super().__init__(title)
        self.title = title
        self.message = message
        self.suggestion = suggestion
        self.example = example


class ConfigError(ScreenbookError):
    """Invalid or missing configuration."""


class CatalogNotFoundError(ScreenbookError):
    """screens.json has not been built yet."""


class CatalogParseError(ScreenbookError):
    """screens.json exists but cannot be read."""


class GitError(ScreenbookError):
    """Changed files could not be listed."""


class PolicyError(ScreenbookError):
    """A check failed under the active CLI policy (strict mode, minimum coverage)."""


_META_EXAMPLE = """\
screen:
  id: example.screen
  title: Example Screen
  route: /example"""


def config_not_found(path: str) -> ConfigError:
    return ConfigError(
        f"Config file not found: {path}",
        suggestion="Check the --config path, or create a screenbook.config.yaml.",
        example="metaPattern: src/**/screen.meta.yaml\nroutesPattern: src/pages/**/page.tsx",
    )


def config_invalid(path: str, problems: list[str]) -> ConfigError:
    return ConfigError(
        f"Invalid configuration in {path}",
        message="\n".join(problems),
        suggestion="Fix the keys listed above in your screenbook config.",
    )


def routes_pattern_missing() -> ConfigError:
    return ConfigError(
        "Routes configuration not found",
        suggestion="Add routesPattern to your screenbook.config.yaml.",
        example=(
            'routesPattern: "src/pages/**/page.tsx"   # Vite/React\n'
            'routesPattern: "app/**/page.tsx"         # Next.js App Router\n'
            'routesPattern: "src/pages/**/*.vue"      # Vue/Nuxt'
        ),
    )


def screens_not_found(path: str) -> CatalogNotFoundError:
    return CatalogNotFoundError(
        f"screens.json not found at {path}",
        message="If you haven't set up Screenbook yet, add screen.meta.yaml files first.",
        suggestion="Run 'screenbook build' first to generate the screen catalog.",
    )


def screens_parse_error(detail: str) -> CatalogParseError:
    return CatalogParseError(
        "Failed to parse screens.json",
        message=detail,
        suggestion="The file may be corrupted. Run 'screenbook build' to regenerate it.",
    )


def meta_file_load_error(path: str, detail: str) -> PolicyError:
    return PolicyError(
        f"Failed to load {path}",
        message=detail,
        suggestion="Check the file for YAML syntax errors. It should define a 'screen' mapping.",
        example=_META_EXAMPLE,
    )


def api_name_required() -> ScreenbookError:
    return ScreenbookError(
        "API name is required",
        suggestion="Provide the API name as an argument.",
        example="screenbook impact UserAPI.getProfile",
    )


def git_changed_files_error(base_branch: str, detail: str | None = None) -> GitError:
    return GitError(
        "Failed to get changed files from git",
        message=detail
        or f"Make sure you are in a git repository and the base branch '{base_branch}' exists.",
        suggestion=f"Verify the base branch exists with: git branch -a | grep {base_branch}",
    )


def openapi_parse_error(source: str, detail: str) -> ScreenbookError:
    return ScreenbookError(
        f"Failed to parse OpenAPI document: {source}",
        message=detail,
        suggestion="Check apiIntegration.openapi paths in your screenbook config.",
    )


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def validation_failed(error_count: int) -> PolicyError:
    return PolicyError(
        f"Validation failed with {_plural(error_count, 'error')}",
        suggestion="Fix the errors above. Screen references must point to existing screens.",
    )


def depends_on_invalid(count: int) -> PolicyError:
    return PolicyError(
        f"{_plural(count, 'dependsOn reference')} not found in OpenAPI specs",
        suggestion=(
            "Fix the dependsOn entries listed above, or add the missing spec to "
            "apiIntegration.openapi in your config."
        ),
    )


def lint_missing_meta(missing: int, total_routes: int) -> PolicyError:
    verb = "is" if missing == 1 else "are"
    return PolicyError(
        f"{_plural(missing, 'route')} missing screen metadata",
        message=f"Found {_plural(total_routes, 'route file')}, but {missing} {verb} missing "
        "colocated screen metadata.",
        suggestion="Add screen.meta.yaml files next to your route files.",
    )


def coverage_below_minimum(percentage: int, minimum: int) -> PolicyError:
    return PolicyError(
        f"Coverage {percentage}% is below minimum {minimum}%",
        suggestion="Add screen metadata for the missing routes, or lower adoption.minimumCoverage.",
    )


def cycles_detected(cycle_count: int) -> PolicyError:
    return PolicyError(
        f"{_plural(cycle_count, 'circular navigation')} detected",
        suggestion=(
            "Review the navigation flow. Set 'allowCycles: true' on a screen to allow "
            "intentional cycles, or pass --allow-cycles to suppress all warnings."
        ),
        example="screen:\n  id: billing.invoice.detail\n  next: [billing.invoices]\n  allowCycles: true",
    )
