"""Tests for glob matching and file discovery."""

from pathlib import Path

import pytest

from screenbook.patterns import find_files, matches, matches_any


class TestMatches:
    @pytest.mark.parametrize(
        "path, pattern, expected",
        [
            ("src/pages/home/page.tsx", "src/pages/**/page.tsx", True),
            ("src/pages/page.tsx", "src/pages/**/page.tsx", True),
            ("src/pages/a/b/c/page.tsx", "src/pages/**/page.tsx", True),
            ("src/pages/home/index.tsx", "src/pages/**/page.tsx", False),
            ("src/pages/home.vue", "src/pages/*.vue", True),
            ("src/pages/a/home.vue", "src/pages/*.vue", False),
            ("node_modules/x/screen.meta.yaml", "**/node_modules/**", True),
            ("app/node_modules/x/y.ts", "**/node_modules/**", True),
            ("app/my_node_modules/x.ts", "**/node_modules/**", False),
            ("src/a.ts", "src/?.ts", True),
            ("src/ab.ts", "src/?.ts", False),
            ("src/a+b.ts", "src/a+b.ts", True),
        ],
    )
    def test_match(self, path, pattern, expected):
        assert matches(path, pattern) is expected

    def test_matches_any(self):
        assert matches_any("a/b.ts", ["x/**", "a/*.ts"])
        assert not matches_any("a/b.ts", [])


class TestFindFiles:
    def test_sorted_relative_posix_paths(self, tmp_path: Path):
        for rel in ("src/b/page.tsx", "src/a/page.tsx", "src/a/other.tsx"):
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("")
        assert find_files(tmp_path, "src/**/page.tsx") == ["src/a/page.tsx", "src/b/page.tsx"]

    def test_ignore(self, tmp_path: Path):
        for rel in ("src/a/page.tsx", "src/node_modules/x/page.tsx"):
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("")
        assert find_files(tmp_path, "src/**/page.tsx", ["**/node_modules/**"]) == [
            "src/a/page.tsx"
        ]

    def test_directories_skipped(self, tmp_path: Path):
        (tmp_path / "src" / "page.tsx").mkdir(parents=True)
        assert find_files(tmp_path, "src/**/page.tsx") == []
