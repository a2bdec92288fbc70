"""Tests for severity tiers and deflection strategy effectiveness."""
import pytest

from impact_api.defense import (
    STRATEGY_CATALOG,
    Severity,
    StrategyDescriptor,
    classify_severity,
    evaluate_strategies,
    strategies_from_ids,
)
from impact_api.params import ValidationError


class TestClassifySeverity:

    def test_low(self):
        assert classify_severity(0.0) is Severity.LOW
        assert classify_severity(0.0999) is Severity.LOW

    def test_boundary_moderate(self):
        """Exactly 0.1 -> moderate (not low)."""
        assert classify_severity(0.1) is Severity.MODERATE

    def test_boundary_high(self):
        """Exactly 1.0 -> high (not moderate)."""
        assert classify_severity(1.0) is Severity.HIGH

    def test_boundary_severe(self):
        assert classify_severity(10.0) is Severity.SEVERE
        assert classify_severity(99.9) is Severity.SEVERE

    def test_catastrophic(self):
        assert classify_severity(100.0) is Severity.CATASTROPHIC
        assert classify_severity(1e15) is Severity.CATASTROPHIC

    def test_monotonic(self):
        yields = [10 ** (k / 4) for k in range(-20, 40)]
        ranks = [classify_severity(y).rank for y in yields]
        assert ranks == sorted(ranks)


class TestEffectiveness:

    def test_no_lead_time(self):
        kinetic, gravity = evaluate_strategies(0.0)
        assert kinetic.type == "kinetic"
        assert kinetic.effectiveness == pytest.approx(0.5)
        assert gravity.effectiveness == pytest.approx(0.4)
        assert not kinetic.recommended
        assert not gravity.recommended

    def test_threshold_is_strict(self):
        kinetic, _ = evaluate_strategies(2190.0)  # a quarter year
        assert kinetic.effectiveness == pytest.approx(0.6)
        assert not kinetic.recommended

    def test_one_year(self):
        kinetic, gravity = evaluate_strategies(8760.0)
        assert kinetic.effectiveness == pytest.approx(0.9)
        assert gravity.effectiveness == pytest.approx(0.625)
        assert kinetic.recommended and gravity.recommended

    def test_ceilings(self):
        kinetic, gravity = evaluate_strategies(1e6)
        assert kinetic.effectiveness == 0.9
        assert gravity.effectiveness == 0.85

    def test_monotonic_in_lead_time(self):
        leads = [0.0, 24.0, 288.0, 2000.0, 8760.0, 17520.0, 50000.0]
        for sid in ("kinetic", "gravity"):
            effs = [next(o for o in evaluate_strategies(t) if o.type == sid).effectiveness for t in leads]
            assert effs == sorted(effs)
            assert all(0.0 <= e <= 1.0 for e in effs)

    @pytest.mark.parametrize("lead", [-1.0, float("nan")])
    def test_bad_lead_time(self, lead):
        with pytest.raises(ValidationError) as exc:
            evaluate_strategies(lead)
        assert exc.value.field == "lead_time_hours"


class TestStrategySet:

    def test_declaration_order_kept(self):
        out = evaluate_strategies(100.0, strategies_from_ids(["gravity", "kinetic"]))
        assert [o.type for o in out] == ["gravity", "kinetic"]

    def test_kinetic_only(self):
        out = evaluate_strategies(100.0, strategies_from_ids(["kinetic"]))
        assert len(out) == 1

    def test_unknown_id(self):
        with pytest.raises(ValueError, match="nuclear"):
            strategies_from_ids(["kinetic", "nuclear"])

    def test_custom_descriptor(self):
        laser = StrategyDescriptor("laser", "Laser Ablation", 0.3, 0.6, 8760.0, 0.95, "Very High", "1-5 years")
        (out,) = evaluate_strategies(8760.0, [laser])
        assert out.effectiveness == pytest.approx(0.9)
        assert out.recommended
        assert out.cost_tier == "Very High"

    def test_catalog_metadata(self):
        assert STRATEGY_CATALOG["kinetic"].name == "Kinetic Impactor"
        assert STRATEGY_CATALOG["gravity"].name == "Gravity Tractor"
