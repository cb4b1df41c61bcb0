"""Unit tests for the explainability layer."""

import pytest

from advisor.signals.engine import analyze, collect_rationale
from advisor.signals.explainability import build_debug_trace, compute_score_breakdown
from advisor.signals.rationale import (
    RATIONALE_TAXONOMY,
    build_explanation_object,
    format_explanation,
)
from advisor.signals.rules import Rule
from advisor.signals.strategies import score_rules
from advisor.signals.types import IndicatorSnapshot, MacdValues, StrategyKind

E2E_SNAPSHOT = IndicatorSnapshot(
    close=360, rsi14=75, macd=MacdValues(1.2, 0.8, 0.4), ma20=340, volume=2_000_000,
)

SNAPSHOTS = [
    IndicatorSnapshot(close=100),
    E2E_SNAPSHOT,
    IndicatorSnapshot(close=100, rsi14=15),
    IndicatorSnapshot(close=90, rsi14=25, macd=MacdValues(0.1, 0.4), ma20=100, volume=5_000_000),
    IndicatorSnapshot(close=100, rsi14=55, macd=MacdValues(0.5, 0.2)),
    IndicatorSnapshot(close=100, rsi14=45, macd=MacdValues(0.2, 0.5)),
]


class TestRationaleTaxonomy:
    """Tests for rationale categorization."""

    def test_categorize_drivers(self):
        """Fired rules should be categorized as drivers."""
        result = build_explanation_object(["momentum_rsi_strong", "momentum_macd_golden_cross"])

        assert len(result["drivers"]) == 2
        assert len(result["risks"]) == 0
        assert "MACD golden cross (DIF above DEA)" in result["drivers"]

    def test_categorize_risks(self):
        """Extreme readings and neutral strategies should be risks."""
        result = build_explanation_object(["aggregate_extreme_rsi", "breakout_hold"])

        assert len(result["risks"]) == 2
        assert len(result["drivers"]) == 0

    def test_categorize_notes(self):
        """Market condition tags should be notes."""
        result = build_explanation_object(["market_ranging", "momentum_strength_clamped"])

        assert len(result["notes"]) == 2
        assert "Market is ranging without a clear trend" in result["notes"]

    def test_unknown_tags(self):
        """Unknown tags should be treated as notes."""
        result = build_explanation_object(["unknown_tag_xyz"])
        assert result["notes"] == ["Unknown rationale: unknown_tag_xyz"]

    @pytest.mark.parametrize("snapshot", SNAPSHOTS)
    def test_every_emitted_tag_known(self, snapshot):
        """Every tag the engine emits should be in the taxonomy."""
        tags = collect_rationale(analyze(snapshot))
        assert [t for t in tags if t not in RATIONALE_TAXONOMY] == []

    def test_duplicates_collapsed(self):
        """Repeated tags should appear once."""
        result = build_explanation_object(["market_ranging", "market_ranging"])
        assert len(result["notes"]) == 1


class TestFormatExplanation:
    """Tests for format_explanation."""

    def test_drivers_and_risks(self):
        """Drivers and risks should be joined into one paragraph."""
        text = format_explanation(["A", "B"], ["C"], ["D"])
        assert text == "Drivers: A; B. Risks: C."

    def test_notes_only(self):
        """Notes should appear when there is room."""
        assert format_explanation([], [], ["N"]) == "Notes: N."

    def test_empty(self):
        """Nothing to explain should return a fallback string."""
        assert format_explanation([], [], []) == "No explanation available."


class TestScoreBreakdown:
    """Tests for compute_score_breakdown."""

    def test_momentum_breakdown(self):
        """Base plus matched weights should reproduce the strength."""
        report = analyze(E2E_SNAPSHOT)
        breakdown = compute_score_breakdown(report.signals[0])

        assert breakdown["strategy"] == "momentum"
        assert breakdown["base"] == 50.0
        assert breakdown["raw_strength"] == 85.0
        assert breakdown["strength"] == 85.0
        assert breakdown["clamped"] is False
        assert len(breakdown["contributions"]) == 6

        fired = {c["rule_id"]: c["contribution"] for c in breakdown["contributions"] if c["matched"]}
        assert fired == {"momentum_rsi_strong": 20.0, "momentum_macd_golden_cross": 15.0}

    def test_unmatched_rules_keep_nominal_weight(self):
        """Unmatched rules should show their weight but contribute zero."""
        report = analyze(E2E_SNAPSHOT)
        breakdown = compute_score_breakdown(report.signals[0])
        firm = next(c for c in breakdown["contributions"] if c["rule_id"] == "momentum_rsi_firm")

        assert firm["matched"] is False
        assert firm["weight"] == 10.0
        assert firm["contribution"] == 0.0

    def test_clamped_breakdown(self):
        """Clamped strengths should be flagged."""
        rules = (Rule("boost", 90.0, (), lambda s: True),)
        signal = score_rules(StrategyKind.BREAKOUT, rules, IndicatorSnapshot(close=1))
        breakdown = compute_score_breakdown(signal)

        assert breakdown["raw_strength"] == 140.0
        assert breakdown["strength"] == 100.0
        assert breakdown["clamped"] is True


class TestDebugTrace:
    """Tests for build_debug_trace."""

    def test_sparse_snapshot(self):
        """Absent fields should be listed and deviation omitted."""
        trace = build_debug_trace(analyze(IndicatorSnapshot(close=100), symbol="TEST"))

        assert trace["symbol"] == "TEST"
        assert trace["fields_absent"] == ["rsi14", "macd", "ma20", "ema5", "volume"]
        assert trace["ma20_deviation"] is None
        assert trace["aggregate_calculation"]["overall_score"] == 50

    def test_full_snapshot(self):
        """Trace should mirror the report without recalculating."""
        report = analyze(E2E_SNAPSHOT)
        trace = build_debug_trace(report)

        assert trace["fields_absent"] == ["ema5"]
        assert trace["ma20_deviation"] == pytest.approx(20 / 340, abs=1e-6)
        assert trace["ranking"] == ["momentum", "breakout", "mean_reversion"]
        assert trace["aggregate_calculation"]["strengths"] == [85.0, 10.0, 70.0]
        assert trace["aggregate_calculation"]["mean_strength"] == 55.0
        assert len(trace["score_breakdown"]) == 3
        assert trace["rationale_tags"] == list(report.aggregate.rationale)
