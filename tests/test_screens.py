"""Tests for screen types, the id registry, and loading meta files / catalogs."""

import json
from pathlib import Path

import pytest
import yaml

from screenbook.errors import CatalogNotFoundError, CatalogParseError
from screenbook.screens.loader import LoadFailure, ScreenLoader, dump_catalog, load_catalog
from screenbook.screens.registry import ScreenRegistry, as_screen_list
from screenbook.screens.types import Screen, ScreenLink, ScreenParseFailure, parse_screen


def _write_meta(base: Path, rel: str, data) -> Path:
    path = base / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump(data))
    return path


# ── Fixtures ──


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A project with two valid screens, one broken one and an ignored one."""
    _write_meta(
        tmp_path,
        "src/pages/home/screen.meta.yaml",
        {
            "screen": {
                "id": "home",
                "title": "Home",
                "route": "/",
                "entryPoints": [],
                "next": ["billing.invoices"],
            }
        },
    )
    _write_meta(
        tmp_path,
        "src/pages/billing/invoices/screen.meta.yaml",
        {
            "id": "billing.invoices",
            "title": "Invoices",
            "route": "/billing/invoices",
            "owner": ["billing"],
            "dependsOn": ["InvoiceAPI.list"],
        },
    )
    _write_meta(tmp_path, "src/pages/broken/screen.meta.yaml", {"screen": {"id": "broken"}})
    _write_meta(
        tmp_path,
        "src/node_modules/pkg/screen.meta.yaml",
        {"screen": {"id": "vendored", "title": "Vendored", "route": "/x"}},
    )
    return tmp_path


# ── parse_screen ──


class TestParseScreen:
    def test_minimal_screen(self):
        screen = parse_screen({"id": "home", "title": "Home", "route": "/"})
        assert screen == Screen(id="home", title="Home", route="/")
        assert screen.next is None
        assert screen.allow_cycles is False

    def test_full_screen(self):
        screen = parse_screen(
            {
                "id": "billing.invoice.detail",
                "title": "Invoice Detail",
                "route": "/billing/invoices/:id",
                "owner": ["billing"],
                "tags": ["billing", "invoice"],
                "dependsOn": ["InvoiceAPI.getDetail"],
                "entryPoints": ["billing.invoices"],
                "next": ["billing.invoices"],
                "allowCycles": True,
                "description": "Shows one invoice",
                "links": [{"label": "Figma", "url": "https://figma.com/file/abc", "type": "figma"}],
            },
            source_file="src/pages/x/screen.meta.yaml",
        )
        assert isinstance(screen, Screen)
        assert screen.depends_on == ("InvoiceAPI.getDetail",)
        assert screen.entry_points == ("billing.invoices",)
        assert screen.links == (ScreenLink("Figma", "https://figma.com/file/abc", "figma"),)
        assert screen.source_file == "src/pages/x/screen.meta.yaml"

    def test_missing_required_fields_reported_together(self):
        result = parse_screen({"id": "x"})
        assert isinstance(result, ScreenParseFailure)
        paths = [issue.path for issue in result.issues]
        assert paths == ["title", "route"]

    def test_empty_id_rejected(self):
        result = parse_screen({"id": "", "title": "T", "route": "/"})
        assert isinstance(result, ScreenParseFailure)
        assert "must not be empty" in str(result)

    def test_non_string_list_item(self):
        result = parse_screen({"id": "a", "title": "A", "route": "/a", "next": ["b", 3]})
        assert isinstance(result, ScreenParseFailure)
        assert result.issues[0].path == "next[1]"

    def test_allow_cycles_must_be_bool(self):
        result = parse_screen({"id": "a", "title": "A", "route": "/a", "allowCycles": "yes"})
        assert isinstance(result, ScreenParseFailure)

    def test_link_url_must_be_absolute(self):
        result = parse_screen(
            {"id": "a", "title": "A", "route": "/a", "links": [{"label": "Doc", "url": "docs"}]}
        )
        assert isinstance(result, ScreenParseFailure)
        assert result.issues[0].path == "links[0].url"

    def test_non_mapping_raises(self):
        with pytest.raises(TypeError):
            parse_screen(["not", "a", "mapping"])

    def test_failure_str_includes_source(self):
        result = parse_screen({}, source_file="a/screen.meta.yaml")
        assert str(result).startswith("a/screen.meta.yaml: ")


class TestScreenToDict:
    def test_omits_absent_optionals(self):
        screen = Screen(id="home", title="Home", route="/")
        assert screen.to_dict() == {"id": "home", "title": "Home", "route": "/"}

    def test_camel_case_keys(self):
        screen = Screen(
            id="a",
            title="A",
            route="/a",
            depends_on=("Api.x",),
            entry_points=(),
            allow_cycles=True,
        )
        d = screen.to_dict()
        assert d["dependsOn"] == ["Api.x"]
        assert d["entryPoints"] == []
        assert d["allowCycles"] is True

    def test_parse_accepts_own_output(self):
        screen = Screen(
            id="a",
            title="A",
            route="/a",
            tags=("t",),
            links=(ScreenLink("Storybook", "https://sb.example.com"),),
        )
        assert parse_screen(screen.to_dict()) == screen

    def test_source_file_ignored_in_equality(self):
        assert Screen("a", "A", "/a", source_file="x") == Screen("a", "A", "/a")


# ── ScreenRegistry ──


class TestScreenRegistry:
    def test_lookup(self):
        registry = ScreenRegistry([Screen("a", "A", "/a"), Screen("b", "B", "/b")])
        assert registry.has("a")
        assert "b" in registry
        assert registry.get("missing") is None
        assert registry.ids == frozenset({"a", "b"})
        assert len(registry) == 2

    def test_duplicate_id_last_wins(self):
        first = Screen("a", "First", "/1")
        second = Screen("a", "Second", "/2")
        registry = ScreenRegistry([first, second])
        assert registry.get("a") is second
        assert list(registry) == [first, second]

    def test_as_screen_list_accepts_registry(self):
        screens = [Screen("a", "A", "/a")]
        assert as_screen_list(ScreenRegistry(screens)) == screens

    @pytest.mark.parametrize("bad", ["abc", None, 42, [{"id": "a"}]])
    def test_as_screen_list_rejects_non_screens(self, bad):
        with pytest.raises(TypeError):
            as_screen_list(bad)


# ── ScreenLoader ──


class TestScreenLoader:
    def test_discover_skips_ignored(self, project_dir):
        loader = ScreenLoader(project_dir)
        assert loader.discover() == [
            "src/pages/billing/invoices/screen.meta.yaml",
            "src/pages/broken/screen.meta.yaml",
            "src/pages/home/screen.meta.yaml",
        ]

    def test_load_all_collects_failures(self, project_dir):
        loader = ScreenLoader(project_dir)
        loader.load_all()
        assert [s.id for s in loader.screens] == ["billing.invoices", "home"]
        assert len(loader.failures) == 1
        assert loader.failures[0].file == "src/pages/broken/screen.meta.yaml"

    def test_bare_mapping_supported(self, project_dir):
        loader = ScreenLoader(project_dir)
        loader.load_all()
        assert loader.get_screen("billing.invoices").owner == ("billing",)

    def test_source_file_recorded(self, project_dir):
        loader = ScreenLoader(project_dir)
        loader.load_all()
        assert loader.get_screen("home").source_file == "src/pages/home/screen.meta.yaml"

    def test_empty_file(self, tmp_path):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "screen.meta.yaml").write_text("")
        result = ScreenLoader(tmp_path).load_file("src/screen.meta.yaml")
        assert isinstance(result, LoadFailure)
        assert "empty" in result.message

    def test_yaml_syntax_error(self, tmp_path):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "screen.meta.yaml").write_text("screen: [unclosed\n")
        result = ScreenLoader(tmp_path).load_file("src/screen.meta.yaml")
        assert isinstance(result, LoadFailure)
        assert "YAML parse error" in result.message

    def test_list_screens_returns_copy(self, project_dir):
        loader = ScreenLoader(project_dir)
        loader.load_all()
        loader.list_screens().clear()
        assert len(loader.screens) == 2


# ── screens.json catalog ──


class TestCatalog:
    def test_dump_then_load(self, tmp_path):
        screens = [
            Screen("home", "Home", "/", next=("dash",)),
            Screen("dash", "Dashboard", "/dash", depends_on=("InvoiceAPI",)),
        ]
        path = tmp_path / ".screenbook" / "screens.json"
        dump_catalog(screens, path)
        assert json.loads(path.read_text())[0] == {
            "id": "home",
            "title": "Home",
            "route": "/",
            "next": ["dash"],
        }
        assert load_catalog(path) == screens

    def test_missing_catalog(self, tmp_path):
        with pytest.raises(CatalogNotFoundError):
            load_catalog(tmp_path / "screens.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "screens.json"
        path.write_text("{not json")
        with pytest.raises(CatalogParseError):
            load_catalog(path)

    def test_not_an_array(self, tmp_path):
        path = tmp_path / "screens.json"
        path.write_text(json.dumps({"id": "a"}))
        with pytest.raises(CatalogParseError, match="parse"):
            load_catalog(path)

    def test_invalid_entry_reports_index(self, tmp_path):
        path = tmp_path / "screens.json"
        path.write_text(json.dumps([{"id": "a", "title": "A", "route": "/a"}, {"id": "b"}]))
        with pytest.raises(CatalogParseError) as excinfo:
            load_catalog(path)
        assert "[1]" in excinfo.value.message
