"""Tests for API impact analysis."""

import json

import pytest

from screenbook.analysis.impact import (
    ImpactResult,
    analyze_impact,
    build_reverse_navigation_graph,
    find_direct_dependents,
    format_impact_json,
    format_impact_text,
    matches_dependency,
)
from screenbook.screens.registry import ScreenRegistry
from screenbook.screens.types import Screen


def _screen(screen_id, next=(), depends_on=(), owner=None):
    return Screen(
        id=screen_id,
        title=screen_id.title(),
        route=f"/{screen_id}",
        next=tuple(next) or None,
        depends_on=tuple(depends_on) or None,
        owner=owner,
    )


@pytest.fixture
def billing_screens():
    """home -> invoices -> detail (uses InvoiceAPI.getDetail), detail -> invoices."""
    return [
        _screen("home", next=["billing.invoices"]),
        _screen("billing.invoices", next=["billing.detail"], depends_on=["InvoiceAPI.list"]),
        _screen(
            "billing.detail",
            next=["billing.invoices"],
            depends_on=["InvoiceAPI.getDetail"],
            owner=("billing",),
        ),
        _screen("settings", depends_on=["UserAPI.getProfile"]),
    ]


class TestMatchesDependency:
    @pytest.mark.parametrize(
        "dependency, api, expected",
        [
            ("InvoiceAPI", "InvoiceAPI", True),
            ("InvoiceAPI.getDetail", "InvoiceAPI", True),
            ("InvoiceAPI.getDetail", "InvoiceAPI.getDetail", True),
            ("InvoiceAPIv2", "InvoiceAPI", False),
            ("InvoiceAPI", "InvoiceAPI.getDetail", False),
            ("invoiceapi", "InvoiceAPI", False),
        ],
    )
    def test_match(self, dependency, api, expected):
        assert matches_dependency(dependency, api) is expected


class TestAnalyzeImpact:
    def test_direct_and_transitive(self):
        screens = [_screen("home", next=["dash"]), _screen("dash", depends_on=["InvoiceAPI.list"])]
        result = analyze_impact(screens, "InvoiceAPI")
        assert [s.id for s in result.direct] == ["dash"]
        assert [(t.screen.id, t.path) for t in result.transitive] == [("home", ("home", "dash"))]
        assert result.total_count == 2

    def test_depth_zero_has_no_transitive(self, billing_screens):
        result = analyze_impact(billing_screens, "InvoiceAPI", max_depth=0)
        assert [s.id for s in result.direct] == ["billing.invoices", "billing.detail"]
        assert result.transitive == []

    def test_direct_never_transitive(self, billing_screens):
        result = analyze_impact(billing_screens, "InvoiceAPI")
        direct_ids = {s.id for s in result.direct}
        assert direct_ids.isdisjoint(t.screen.id for t in result.transitive)
        assert [t.path for t in result.transitive] == [("home", "billing.invoices")]

    def test_paths_are_shortest_and_end_at_direct(self, billing_screens):
        result = analyze_impact(billing_screens, "InvoiceAPI.getDetail", max_depth=5)
        assert [t.path for t in result.transitive] == [
            ("home", "billing.invoices", "billing.detail"),
            ("billing.invoices", "billing.detail"),
        ]
        for dep in result.transitive:
            assert dep.path[0] == dep.screen.id
            assert dep.path[-1] == "billing.detail"

    def test_depth_limits_path_length(self, billing_screens):
        result = analyze_impact(billing_screens, "InvoiceAPI.getDetail", max_depth=1)
        assert [t.path for t in result.transitive] == [("billing.invoices", "billing.detail")]

    def test_more_depth_never_loses_screens(self, billing_screens):
        found = []
        for depth in range(4):
            result = analyze_impact(billing_screens, "InvoiceAPI.getDetail", max_depth=depth)
            found.append({t.screen.id for t in result.transitive})
        for shallow, deep in zip(found, found[1:]):
            assert shallow <= deep

    def test_cycles_terminate(self):
        screens = [
            _screen("a", next=["b"]),
            _screen("b", next=["c"]),
            _screen("c", next=["a"], depends_on=["Api"]),
        ]
        result = analyze_impact(screens, "Api", max_depth=10)
        assert [t.path for t in result.transitive] == [("a", "b", "c"), ("b", "c")]

    def test_transitive_in_input_order(self):
        # y reaches the first direct dependent, x the second; x is declared first
        screens = [
            _screen("x", next=["d2"]),
            _screen("y", next=["d1"]),
            _screen("d1", depends_on=["A"]),
            _screen("d2", depends_on=["A"]),
        ]
        result = analyze_impact(screens, "A")
        assert [s.id for s in result.direct] == ["d1", "d2"]
        assert [(t.screen.id, t.path) for t in result.transitive] == [
            ("x", ("x", "d2")),
            ("y", ("y", "d1")),
        ]

    def test_unknown_api(self, billing_screens):
        result = analyze_impact(billing_screens, "NopeAPI")
        assert result.total_count == 0

    def test_reverse_edge_from_unknown_source_skipped(self):
        # "ghost" is referenced only as a target, so it never becomes a source
        screens = [_screen("a", next=["ghost"], depends_on=["Api"])]
        assert analyze_impact(screens, "Api").transitive == []

    def test_accepts_registry(self, billing_screens):
        result = analyze_impact(ScreenRegistry(billing_screens), "UserAPI")
        assert [s.id for s in result.direct] == ["settings"]

    def test_negative_depth_rejected(self, billing_screens):
        with pytest.raises(ValueError):
            analyze_impact(billing_screens, "InvoiceAPI", max_depth=-1)

    def test_to_dict(self):
        screens = [_screen("home", next=["dash"]), _screen("dash", depends_on=["Api"])]
        d = analyze_impact(screens, "Api").to_dict()
        assert d["api"] == "Api"
        assert d["totalCount"] == 2
        assert d["transitive"] == [
            {"screen": {"id": "home", "title": "Home", "route": "/home", "next": ["dash"]},
             "path": ["home", "dash"]}
        ]


class TestHelpers:
    def test_find_direct_dependents(self, billing_screens):
        assert [s.id for s in find_direct_dependents(billing_screens, "UserAPI")] == ["settings"]

    def test_reverse_graph(self, billing_screens):
        reverse = build_reverse_navigation_graph(billing_screens)
        assert reverse == {
            "billing.invoices": ["home", "billing.detail"],
            "billing.detail": ["billing.invoices"],
        }


class TestFormatting:
    def test_text(self, billing_screens):
        text = format_impact_text(analyze_impact(billing_screens, "InvoiceAPI.getDetail"))
        assert "Impact Analysis: InvoiceAPI.getDetail" in text
        assert "Direct (1 screen):" in text
        assert "billing.detail  /billing.detail [billing]" in text
        assert "home -> billing.invoices -> billing.detail" in text
        assert "Total: 3 screens affected" in text

    def test_text_no_impact(self):
        text = format_impact_text(ImpactResult(api="Nope"))
        assert "No screens depend on this API." in text

    def test_json(self, billing_screens):
        payload = json.loads(format_impact_json(analyze_impact(billing_screens, "InvoiceAPI")))
        assert payload["summary"] == {"directCount": 2, "transitiveCount": 1, "totalCount": 3}
        assert payload["direct"][1]["owner"] == ["billing"]
        assert payload["transitive"][0]["path"] == ["home", "billing.invoices"]
