"""Tests for pull request impact helpers."""

import subprocess

import pytest

from screenbook.analysis.impact import analyze_impact
from screenbook.analysis.pr_impact import (
    capitalize,
    changed_files,
    extract_api_names,
    format_pr_markdown,
)
from screenbook.errors import GitError
from screenbook.screens.types import Screen


class TestExtractApiNames:
    @pytest.mark.parametrize(
        "file, expected",
        [
            ("src/api/InvoiceAPI.ts", "InvoiceAPI"),
            ("src/api/invoice.ts", "InvoiceAPI"),
            ("src/apis/UserApi.tsx", "UserApi"),
            ("src/services/invoice/index.ts", "InvoiceService"),
            ("src/services/payment/payment.ts", "PaymentService"),
            ("src/services/BillingService.ts", "BillingService"),
            ("src/lib/apiClient.ts", "apiClient"),
        ],
    )
    def test_detects(self, file, expected):
        assert expected in extract_api_names([file])

    def test_unrelated_files(self):
        assert extract_api_names(["README.md", "src/pages/home/page.tsx"]) == []

    def test_sorted_and_deduplicated(self):
        files = ["src/api/invoice.ts", "src/api/InvoiceAPI.ts", "src/api/auth.ts"]
        assert extract_api_names(files) == ["AuthAPI", "InvoiceAPI"]

    def test_capitalize(self):
        assert capitalize("invoice") == "Invoice"
        assert capitalize("") == ""


class TestChangedFiles:
    def test_parses_git_output(self, monkeypatch):
        def fake_run(cmd, **kwargs):
            assert cmd == ["git", "diff", "--name-only", "main...HEAD"]
            return subprocess.CompletedProcess(cmd, 0, stdout="a.ts\n\nsrc/api/x.ts\n", stderr="")

        monkeypatch.setattr(subprocess, "run", fake_run)
        assert changed_files("main") == ["a.ts", "src/api/x.ts"]

    def test_git_failure(self, monkeypatch):
        def fake_run(cmd, **kwargs):
            raise subprocess.CalledProcessError(128, cmd, stderr="fatal: bad revision")

        monkeypatch.setattr(subprocess, "run", fake_run)
        with pytest.raises(GitError) as excinfo:
            changed_files("nope")
        assert excinfo.value.message == "fatal: bad revision"

    def test_git_missing(self, monkeypatch):
        def fake_run(cmd, **kwargs):
            raise FileNotFoundError("git")

        monkeypatch.setattr(subprocess, "run", fake_run)
        with pytest.raises(GitError):
            changed_files("main")


class TestFormatPrMarkdown:
    def test_no_impact(self):
        text = format_pr_markdown(["src/api/x.ts"], ["XAPI"], [])
        assert "No screen impacts detected" in text
        assert "- `XAPI`" in text

    def test_with_impact(self):
        screens = [
            Screen("home", "Home", "/", next=("invoices",)),
            Screen("invoices", "Invoices", "/invoices", owner=("billing",),
                   depends_on=("InvoiceAPI.list",)),
        ]
        result = analyze_impact(screens, "InvoiceAPI")
        text = format_pr_markdown(["src/api/InvoiceAPI.ts"], ["InvoiceAPI"], [result])
        assert "**2 screens affected** by changes to 1 API" in text
        assert "### InvoiceAPI" in text
        assert "| invoices | `/invoices` | billing |" in text
        assert "- home → invoices" in text
        assert "- `src/api/InvoiceAPI.ts`" in text

    def test_long_file_list_truncated(self):
        screens = [Screen("a", "A", "/a", depends_on=("Api",))]
        files = [f"f{i}.ts" for i in range(25)]
        text = format_pr_markdown(files, ["Api"], [analyze_impact(screens, "Api")])
        assert "- ... and 5 more" in text
        assert "f24.ts" not in text
