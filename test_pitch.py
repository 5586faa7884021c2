"""
Tests for pitch evaluation.
"""
import pytest

from models.client import ClientOpportunity, OFFER_PROJECT
from simulation.pitch import PitchLost, PitchWon, discount_bonus, evaluate_client_offer, evaluate_pitch
from simulation.random_seed import SeededRandom


def _opp(**overrides) -> ClientOpportunity:
    fields = dict(
        id="q1-01", client_name="DataStream", client_type="startup", service_line="brand",
        budget=50000, complexity="medium", deadline="normal", hours_required=300,
        base_win_chance=50.0, quarter=1,
    )
    fields.update(overrides)
    return ClientOpportunity(**fields)


def _evaluate(opp=None, discount=0.0, reputation=50.0, presence=0.0, tech=1.0, training=1.0,
              quality="standard", events=(), seed=1, **kwargs):
    return evaluate_pitch(opp or _opp(), discount, reputation, presence, tech, training,
                          quality, list(events), SeededRandom(seed), **kwargs)


def _modifier(outcome, prefix):
    matches = [value for label, value in outcome.modifiers if label.startswith(prefix)]
    assert len(matches) == 1, outcome.modifiers
    return matches[0]


class TestModifiers:
    def test_neutral_team_keeps_base_chance(self):
        outcome = _evaluate()
        assert outcome.win_chance == 50.0
        assert outcome.modifiers == ()
        assert outcome.factors == ("Base win chance: 50%",)

    def test_reputation_tiers(self):
        assert _modifier(_evaluate(reputation=80), "Reputation") == pytest.approx(8.0)
        assert _modifier(_evaluate(reputation=30), "Reputation") == pytest.approx(-4.0)
        assert _evaluate(reputation=55).modifiers == ()

    def test_market_presence(self):
        assert _modifier(_evaluate(presence=40), "Market presence") == pytest.approx(4.0)

    def test_discount_diminishing(self):
        assert discount_bonus(0) == 0
        assert discount_bonus(50) == pytest.approx(20.0)
        assert discount_bonus(10) - discount_bonus(0) > discount_bonus(50) - discount_bonus(40)
        assert _modifier(_evaluate(discount=25), "Discount") == pytest.approx(12.5)

    def test_capability_fit(self):
        digital = _opp(service_line="digital")
        assert _modifier(_evaluate(digital, tech=2.0), "Tech level") == pytest.approx(3.0)
        # Training does not help a digital pitch
        assert _evaluate(digital, training=3.0).modifiers == ()
        assert _modifier(_evaluate(training=2.0), "Training level") == pytest.approx(3.0)

    @pytest.mark.parametrize("quality,complexity,expected", [
        ("premium", "high", 12.0),
        ("premium", "low", 4.0),
        ("budget", "high", -10.0),
        ("budget", "medium", -5.0),
    ])
    def test_quality_by_complexity(self, quality, complexity, expected):
        outcome = _evaluate(_opp(complexity=complexity), quality=quality)
        assert _modifier(outcome, "Quality") == pytest.approx(expected)

    def test_burnout_and_growth_focus_penalties(self):
        assert _modifier(_evaluate(burnout=70), "Burnout") == pytest.approx(-6.0)
        assert _modifier(_evaluate(growth_focus=90), "Growth focus") == pytest.approx(-6.0)
        assert _evaluate(burnout=50, growth_focus=70).modifiers == ()

    def test_event_modifiers(self):
        social = _opp(service_line="social")
        assert _modifier(_evaluate(social, events=["viralTrend"]), "Viral Trend") == 15.0
        # Viral trend only lifts social pitches
        assert _evaluate(events=["viralTrend"]).modifiers == ()
        assert _modifier(_evaluate(events=["budgetCuts"]), "Budget Cuts") == -8.0
        # Award needs reputation of 70
        assert all(not label.startswith("Industry Award")
                   for label, _ in _evaluate(reputation=60, events=["industryAward"]).modifiers)
        assert _modifier(_evaluate(reputation=75, events=["industryAward"]), "Industry Award") == 10.0


class TestClampAndRoll:
    def test_ceiling(self):
        outcome = _evaluate(_opp(base_win_chance=80, complexity="high"), discount=50, reputation=100,
                            presence=100, quality="premium", events=["referralSurge"])
        assert outcome.win_chance == 95.0
        assert outcome.factors[-1] == "Clamped to 95%"

    def test_floor(self):
        outcome = _evaluate(_opp(base_win_chance=20, complexity="high"), reputation=0, quality="budget",
                            events=["economyTanks", "budgetCuts"], burnout=100, growth_focus=100)
        assert outcome.win_chance == 5.0

    def test_clamp_holds_across_grid(self):
        for base in (20, 50, 80):
            for discount in (0, 25, 50):
                for reputation in (0, 50, 100):
                    for quality in ("budget", "standard", "premium"):
                        outcome = _evaluate(_opp(base_win_chance=base), discount=discount,
                                            reputation=reputation, presence=100, quality=quality)
                        assert 0 <= outcome.win_chance <= 95

    def test_won_iff_roll_below_chance(self):
        for seed in range(50):
            outcome = _evaluate(seed=seed)
            assert 0 <= outcome.roll < 100
            assert outcome.won == (outcome.roll < outcome.win_chance)
            assert isinstance(outcome, PitchWon if outcome.won else PitchLost)

    def test_roll_is_first_draw(self):
        outcome = _evaluate(seed=42)
        assert outcome.roll == SeededRandom(42).next() * 100

    def test_deterministic(self):
        assert _evaluate(discount=10, seed=9) == _evaluate(discount=10, seed=9)

    def test_to_dict(self):
        d = _evaluate().to_dict()
        assert set(d) == {"opportunity_id", "won", "win_chance", "roll", "factors"}


class TestClientOffers:
    def test_existing_client_routing(self):
        project = _opp(id="project-c1-2", base_win_chance=70, offer_kind=OFFER_PROJECT, existing_client_id="c1")
        outcome = _evaluate(project, discount=10, reputation=0, quality="premium", events=["budgetCuts"])
        # Relationship pitch ignores reputation and events
        assert outcome.win_chance == pytest.approx(70 + 3 + 5)

    def test_client_offer_floor_and_ceiling(self):
        project = _opp(base_win_chance=50, offer_kind=OFFER_PROJECT, existing_client_id="c1")
        assert evaluate_client_offer(project, 0, "budget", SeededRandom(1)).win_chance == 50.0
        rich = _opp(base_win_chance=95, offer_kind=OFFER_PROJECT, existing_client_id="c1")
        assert evaluate_client_offer(rich, 50, "premium", SeededRandom(1)).win_chance == 95.0
