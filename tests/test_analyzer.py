from src.narrative.analyzer import analyze_entries, analyze_entry, impact_score, parse_beneficiaries
from src.narrative.metrics import MetricSet
from src.narrative.themes import aggregate_themes


def test_parse_beneficiaries_splits_and_trims():
    assert parse_beneficiaries("Engineering team, End users; Sales & Support") == (
        "Engineering team",
        "End users",
        "Sales",
        "Support",
    )
    assert parse_beneficiaries(" ,, ; ") == ()
    assert parse_beneficiaries(None) == ()


def test_impact_score_weights():
    assert impact_score(MetricSet(), [], "") == 0
    assert impact_score(MetricSet(percentages=("40%",)), ["Sales"], "") == 4
    assert impact_score(MetricSet(currency=("$1M",), counts=("5 teams",)), [], "") == 6
    assert impact_score(MetricSet(), [], "x" * 50) == 0
    assert impact_score(MetricSet(), [], "x" * 51) == 2


def test_impact_score_grows_with_evidence_of_impact():
    base = MetricSet(percentages=("10%",))
    richer = MetricSet(percentages=("10%",), currency=("$2M",))
    assert impact_score(richer, ["Ops"], "") > impact_score(base, ["Ops"], "")
    assert impact_score(base, ["Ops", "Sales"], "") > impact_score(base, ["Ops"], "")


def test_analyze_entry_reads_all_narrative_fields(make_entry):
    item = analyze_entry(
        make_entry(
            what="Renegotiated the CDN contract",
            problem="Cut delivery costs by 18%",
            evidence="Finance confirmed $250K in annual savings",
            who="Finance, Platform",
            tags=["Revenue"],
        )
    )
    assert item.metrics.percentages == ("18%",)
    assert item.metrics.currency == ("$250K",)
    assert item.beneficiaries == ("Finance", "Platform")
    assert item.theme_key == "revenue"
    assert item.theme == "Revenue"
    assert item.impact_score == 3 + 4 + 1 + 1


def test_untagged_entry_uses_general_theme(make_entry):
    item = analyze_entry(make_entry(what="Ran the quarterly planning offsite"))
    assert item.theme_key == "general"
    assert item.theme == "General"
    assert item.has_outcome


def test_theme_ranking_prefers_largest_bucket_regardless_of_order(make_entry):
    entries = [
        make_entry(what="Sped up CI", tags=["speed"]),
        make_entry(what="Ran the roadmap review", tags=["alignment"]),
        make_entry(what="Trimmed cloud spend", tags=["efficiency"]),
        make_entry(what="Automated invoice matching", tags=["efficiency"]),
        make_entry(what="Retired the legacy queue", tags=["efficiency"]),
    ]
    summary = aggregate_themes(analyze_entries(entries))
    assert [bucket.key for bucket in summary.ranked] == ["efficiency", "speed", "alignment"]
    assert summary.selected[0].size == 3

    summary = aggregate_themes(analyze_entries(list(reversed(entries))))
    assert summary.selected[0].key == "efficiency"
    assert [bucket.key for bucket in summary.selected[1:]] == ["alignment", "speed"]


def test_only_top_three_themes_are_selected(make_entry):
    tags = ["speed", "quality", "revenue", "influence", "visibility"]
    entries = [make_entry(what=f"Project {tag}", tags=[tag]) for tag in tags]
    summary = aggregate_themes(analyze_entries(entries))
    assert len(summary.selected) == 3
    assert len(summary.ranked) == 5
    assert len(summary.entries) == 5


def test_beneficiaries_and_metrics_are_unioned(make_entry):
    entries = [
        make_entry(what="Cut p95 latency 30%", who="Mobile, Web", tags=["speed"]),
        make_entry(what="Cut p95 latency 30% again", who="Web; Support", tags=["quality"]),
    ]
    summary = aggregate_themes(analyze_entries(entries))
    assert summary.beneficiaries == ("Mobile", "Web", "Support")
    assert summary.metrics == ("30%",)
    assert summary.top_beneficiaries(1) == ("Web",)
