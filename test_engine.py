"""
Tests for quarter resolution.
"""
from dataclasses import replace

import pytest

from generation.initial_state import create_initial_team_state
from generation.opportunities import generate_client_offers, generate_opportunities
from models import (
    ActiveClient,
    ClientOpportunity,
    GameEvent,
    InvalidInputError,
    PitchDecision,
    TeamInputs,
    TeamState,
    get_default_inputs,
    get_level_config,
)
from models.client import OFFER_PROJECT, OFFER_RENEWAL
from models.constants import FIRING_COST, HIRING_COST, STAFF_COST_PER_QUARTER
from simulation.engine import resolve_quarter, sanitize_inputs, validate_inputs
from simulation.events import advance_events, active_event_types
from simulation.random_seed import SeededRandom, market_random, team_random
from simulation.scoring import check_bankruptcy

LEVEL = get_level_config(2)


def _team(**overrides) -> TeamState:
    fields = dict(
        team_id="t1", company_name="Acme Agency", team_number=1, quarter=1,
        cash=300000, staff=6, burnout=0.0, reputation=55.0, market_presence=20.0,
    )
    fields.update(overrides)
    return TeamState(**fields)


def _opp(**overrides) -> ClientOpportunity:
    fields = dict(
        id="q1-01", client_name="DataStream", client_type="startup", service_line="digital",
        budget=50000, complexity="medium", deadline="normal", hours_required=300,
        base_win_chance=50.0, quarter=1,
    )
    fields.update(overrides)
    return ClientOpportunity(**fields)


def _client(**overrides) -> ActiveClient:
    fields = dict(
        opportunity_id="c1", client_name="Urban Coffee Co", client_type="startup", service_line="brand",
        budget=100000, hours_per_quarter=600, quarters_remaining=3, won_in_quarter=0,
        satisfaction_level=70,
    )
    fields.update(overrides)
    return ActiveClient(**fields)


def _resolve(team, inputs=None, opportunities=(), events=(), level=LEVEL, seed=42):
    return resolve_quarter(
        team, inputs or get_default_inputs(), [team], list(opportunities), list(events), level,
        SeededRandom(seed),
    )


class TestSingleTeamScenario:
    """Seed 42, one team, one £50k pitch at 0% standard, no events, reputation 55."""

    # First draw of SeededRandom(42): (42 * 1664525 + 1013904223) / 2**32
    FIRST_ROLL = 1083814273 / 2 ** 32 * 100

    def _run(self):
        inputs = TeamInputs(pitches=[PitchDecision("q1-01", 0, "standard")])
        return _resolve(_team(), inputs, [_opp()])

    def test_pitch_outcome(self):
        outcome = self._run().pitch_outcomes[0]
        # Base 50 plus 2 points for 20% market presence
        assert outcome.win_chance == 52.0
        assert outcome.roll == self.FIRST_ROLL
        assert outcome.won is True

    def test_exact_cash(self):
        resolution = self._run()
        assert resolution.team.cash == 237500
        assert resolution.result.revenue == 12500
        assert resolution.result.costs == 75000
        assert resolution.result.clients_won == 1
        assert resolution.result.clients_lost == 0

    def test_replay_identical(self):
        a = self._run()
        b = self._run()
        assert a.team.to_dict() == b.team.to_dict()
        assert a.result == b.result
        assert a.pitch_outcomes == b.pitch_outcomes

    def test_won_client_terms(self):
        resolution = self._run()
        client = resolution.team.clients[0]
        assert client.opportunity_id == "q1-01"
        assert client.revenue == 50000
        assert client.quarters_remaining == 4
        assert client.won_in_quarter == 1

    def test_long_shot_loses(self):
        opp = _opp(base_win_chance=20, complexity="high")
        inputs = TeamInputs(pitches=[PitchDecision("q1-01", 0, "budget")])
        resolution = _resolve(_team(reputation=0.0), inputs, [opp])
        outcome = resolution.pitch_outcomes[0]
        assert outcome.win_chance == 5.0
        assert outcome.won is False
        assert resolution.team.cash == 225000
        assert resolution.result.clients_lost == 1
        assert resolution.team.clients == []


class TestStaffing:
    def test_firing_clamped_to_floor(self):
        level = replace(LEVEL, min_staff=1)
        team = _team(staff=2)
        resolution = _resolve(team, TeamInputs(firing_count=5), level=level)
        assert resolution.team.staff == 1
        assert resolution.result.staff_change == -1
        # Only the one actual firing is paid for
        assert resolution.result.costs == 1 * STAFF_COST_PER_QUARTER + FIRING_COST

    def test_firing_below_floor_rejected_at_validation(self):
        level = replace(LEVEL, min_staff=1)
        errors = validate_inputs(TeamInputs(firing_count=5), [], staff=2, level_config=level)
        assert [e.field for e in errors] == ["firing_count"]
        clean, rejected = sanitize_inputs(TeamInputs(firing_count=5, tech_investment=1000), [], 2, level)
        assert clean.firing_count == 0
        assert clean.tech_investment == 1000
        assert rejected

    def test_hiring_costs_and_ceiling(self):
        level = replace(LEVEL, max_staff=8)
        resolution = _resolve(_team(staff=6), TeamInputs(hiring_count=5), level=level)
        assert resolution.team.staff == 8
        assert resolution.result.costs == 8 * STAFF_COST_PER_QUARTER + 2 * HIRING_COST

    def test_capacity_from_staff(self):
        resolution = _resolve(_team(staff=10))
        assert resolution.result.hours_capacity == 10 * 520


class TestInvalidInputs:
    @pytest.mark.parametrize("pitch", [
        PitchDecision("nope", 0, "standard"),
        PitchDecision("q1-01", 60, "standard"),
        PitchDecision("q1-01", -1, "standard"),
        PitchDecision("q1-01", 0, "gold"),
    ])
    def test_bad_pitch_raises_without_drawing(self, pitch):
        team = _team()
        before = team.to_dict()
        rng = SeededRandom(42)
        with pytest.raises(InvalidInputError):
            resolve_quarter(team, TeamInputs(pitches=[pitch]), [team], [_opp()], [], LEVEL, rng)
        assert rng.next() == SeededRandom(42).next()
        assert team.to_dict() == before

    def test_negative_spend_raises(self):
        with pytest.raises(InvalidInputError) as exc:
            _resolve(_team(), TeamInputs(marketing_spend=-5))
        assert exc.value.field == "marketing_spend"

    def test_validate_reports_each_field(self):
        inputs = TeamInputs(
            pitches=[PitchDecision("q1-01", 0, "standard"), PitchDecision("q1-01", 0, "standard"),
                     PitchDecision("ghost", 70, "gold")],
            hiring_count=-1,
            growth_focus=120,
        )
        fields = {e.field for e in validate_inputs(inputs, [_opp()])}
        assert fields == {
            "pitches[1].opportunity_id",
            "pitches[2].opportunity_id",
            "pitches[2].discount_percent",
            "pitches[2].quality_level",
            "hiring_count",
            "growth_focus",
        }

    def test_sanitize_substitutes_defaults(self):
        inputs = TeamInputs(
            pitches=[PitchDecision("q1-01", 10, "premium"), PitchDecision("ghost", 0, "standard")],
            growth_focus=-3,
            wellbeing_spend=-100,
        )
        clean, errors = sanitize_inputs(inputs, [_opp()])
        assert [p.opportunity_id for p in clean.pitches] == ["q1-01"]
        assert clean.growth_focus == 50
        assert clean.wellbeing_spend == 0
        assert len(errors) == 3

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_numbers_rejected(self, value):
        inputs = TeamInputs(
            pitches=[PitchDecision("q1-01", value, "standard")],
            tech_investment=value,
            marketing_spend=value,
            growth_focus=value,
        )
        fields = {e.field for e in validate_inputs(inputs, [_opp()])}
        assert fields == {"pitches[0].discount_percent", "tech_investment", "marketing_spend", "growth_focus"}
        team = _team()
        with pytest.raises(InvalidInputError):
            resolve_quarter(team, TeamInputs(wellbeing_spend=value), [team], [], [], LEVEL, SeededRandom(42))

    def test_wrong_types_rejected(self):
        inputs = TeamInputs(
            pitches=[PitchDecision("q1-01", "10", "standard"), PitchDecision(7, 0, None)],
            marketing_spend="100",
            client_satisfaction_spend=None,
            growth_focus=True,
        )
        fields = {e.field for e in validate_inputs(inputs, [_opp()])}
        assert fields == {
            "pitches[0].discount_percent",
            "pitches[1].opportunity_id",
            "pitches[1].quality_level",
            "marketing_spend",
            "client_satisfaction_spend",
            "growth_focus",
        }
        clean, errors = sanitize_inputs(inputs, [_opp()])
        assert clean.pitches == []
        assert clean.marketing_spend == 0
        assert clean.growth_focus == 50
        assert errors


class TestBankruptcy:
    def test_minus_one_is_bankrupt(self):
        team = _team(cash=6 * STAFF_COST_PER_QUARTER - 1, quarter=3)
        resolution = _resolve(team)
        assert resolution.team.cash == -1
        assert resolution.team.is_bankrupt
        assert resolution.team.bankrupt_quarter == 3
        assert check_bankruptcy(resolution.team)

    def test_zero_cash_is_not_bankrupt(self):
        resolution = _resolve(_team(cash=6 * STAFF_COST_PER_QUARTER))
        assert resolution.team.cash == 0
        assert not resolution.team.is_bankrupt

    def test_bankrupt_team_frozen(self):
        bankrupt = _resolve(_team(cash=6 * STAFF_COST_PER_QUARTER - 1)).team
        inputs = TeamInputs(pitches=[PitchDecision("q2-01", 50, "premium")], tech_investment=50000)
        later = resolve_quarter(bankrupt, inputs, [bankrupt], [_opp(id="q2-01", quarter=2, base_win_chance=80)],
                                [], LEVEL, SeededRandom(1))
        assert later.result is None
        assert later.pitch_outcomes == ()
        assert later.team.is_bankrupt
        assert later.team.clients == []
        assert len(later.team.quarterly_results) == 1
        assert later.team.to_dict() == bankrupt.to_dict()


class TestClientLifecycle:
    def test_notice_given_and_falling_churns(self):
        team = _team(clients=[_client(status="notice_given", satisfaction_level=25, notice_quarter=0)])
        resolution = _resolve(team)
        assert resolution.team.clients == []
        assert resolution.result.clients_churned == 1
        assert resolution.clients_churned == ("Urban Coffee Co",)

    def test_notice_given_recovers_with_spend(self):
        team = _team(clients=[_client(status="notice_given", satisfaction_level=25, notice_quarter=0)])
        resolution = _resolve(team, TeamInputs(client_satisfaction_spend=100000))
        client = resolution.team.clients[0]
        assert client.status == "active"
        assert client.notice_quarter is None
        assert client.satisfaction_level == pytest.approx(40)

    def test_low_satisfaction_gives_notice(self):
        team = _team(quarter=2, clients=[_client(satisfaction_level=35)])
        resolution = _resolve(team)
        client = resolution.team.clients[0]
        assert client.status == "notice_given"
        assert client.notice_quarter == 2
        assert client.quarters_remaining == 2
        assert resolution.clients_given_notice == ("Urban Coffee Co",)

    def test_contract_end_unhappy_churns(self):
        team = _team(clients=[_client(quarters_remaining=1, satisfaction_level=60)])
        resolution = _resolve(team)
        assert resolution.team.clients == []
        assert resolution.result.clients_churned == 1

    def test_contract_end_delighted_renews(self):
        team = _team(clients=[_client(quarters_remaining=1, satisfaction_level=100)])
        resolution = _resolve(team, TeamInputs(client_satisfaction_spend=100000))
        assert resolution.result.clients_renewed == 1
        client = resolution.team.clients[0]
        assert client.quarters_remaining == 4
        assert client.satisfaction_level == 100

    def test_quality_drift(self):
        team = _team(clients=[
            _client(opportunity_id="a", quality_level="premium"),
            _client(opportunity_id="b", quality_level="budget"),
        ])
        a, b = _resolve(team).team.clients
        assert a.satisfaction_level - b.satisfaction_level == pytest.approx(6)

    def test_billing_and_delivery_cost(self):
        team = _team(clients=[_client(quality_level="premium", discount=20)])
        resolution = _resolve(team)
        # 100k * 0.8 / 4 = 20k billed; premium delivery costs 10% of it
        assert resolution.result.revenue == 20000
        assert resolution.result.costs == 6 * STAFF_COST_PER_QUARTER + 2000

    def test_renewal_pitch(self):
        team = _team(clients=[_client(quarters_remaining=1, satisfaction_level=80)])
        offer = _opp(id="renewal-c1-1", base_win_chance=95, offer_kind=OFFER_RENEWAL,
                     existing_client_id="c1", existing_client_satisfaction=80)
        inputs = TeamInputs(pitches=[PitchDecision("renewal-c1-1", 10, "standard")])
        resolution = _resolve(team, inputs, [offer])
        outcome = resolution.pitch_outcomes[0]
        # 95 + 3 discount clamps to 95; seed 42 rolls about 25
        assert outcome.win_chance == 95.0
        assert outcome.won is True
        client = resolution.team.clients[0]
        assert client.quarters_remaining == 4
        assert client.discount == 10
        assert resolution.result.clients_renewed == 1
        assert resolution.result.clients_won == 0

    def test_project_pitch_adds_revenue(self):
        team = _team(clients=[_client(satisfaction_level=80)])
        offer = _opp(id="project-c1-1", budget=30000, hours_required=75, base_win_chance=95,
                     offer_kind=OFFER_PROJECT, existing_client_id="c1")
        inputs = TeamInputs(pitches=[PitchDecision("project-c1-1", 0, "standard")])
        resolution = _resolve(team, inputs, [offer])
        assert resolution.pitch_outcomes[0].won is True
        assert resolution.result.projects_won == 1
        assert resolution.result.revenue == 25000 + 30000
        assert len(resolution.team.clients) == 1


class TestEvents:
    def _event(self, event_type):
        return GameEvent(type=event_type, quarter=1, duration=1)

    def test_talent_poaching_inflates_staff_cost(self):
        resolution = _resolve(_team(), events=[self._event("talentPoaching")])
        assert resolution.result.costs == round(6 * STAFF_COST_PER_QUARTER * 1.15)

    def test_ai_tools_needs_tech(self):
        low = _resolve(_team(), events=[self._event("aiTools")])
        high = _resolve(_team(tech_level=2.0), events=[self._event("aiTools")])
        assert low.result.hours_capacity == 6 * 520
        assert high.result.hours_capacity == pytest.approx(6 * 520 * 1.1)

    def test_team_exodus(self):
        team = create_initial_team_state("t1", "Acme", 1, LEVEL)
        resolution = _resolve(team, events=[self._event("teamExodus")])
        assert resolution.team.staff == 16
        assert resolution.clients_lost_to_events == ("TechStart Solutions",)
        assert "TechStart Solutions" not in [c.client_name for c in resolution.team.clients]

    def test_client_ghosts_takes_newest(self):
        team = _team(clients=[
            _client(opportunity_id="old", client_name="Old", won_in_quarter=0),
            _client(opportunity_id="new", client_name="New", won_in_quarter=3),
        ])
        resolution = _resolve(team, events=[self._event("clientGhosts")])
        assert resolution.clients_lost_to_events == ("New",)

    def test_key_departure_burnout(self):
        resolution = _resolve(_team(burnout=20.0), events=[self._event("keyDeparture")])
        # +10 event, -5 for an idle team
        assert resolution.team.burnout == pytest.approx(25.0)


class TestInvariants:
    def _play(self, quarters=8, seed=7):
        level = get_level_config(3)
        team = create_initial_team_state("t1", "Acme", 1, level)
        events: list[GameEvent] = []
        history = []
        for quarter in range(1, quarters + 1):
            market = market_random(seed, quarter)
            events = advance_events(quarter, level.events, events, market, level=3)
            pool = generate_opportunities(quarter, level, market, active_event_types=active_event_types(events))
            pool += generate_client_offers(team.clients, quarter, SeededRandom(seed * 100 + quarter))
            inputs = TeamInputs(
                pitches=[PitchDecision(o.id, 10 * (i % 3), ("budget", "standard", "premium")[i % 3])
                         for i, o in enumerate(pool[:4])],
                hiring_count=quarter % 2,
                firing_count=3 if quarter % 3 == 0 else 0,
                tech_investment=25000,
                training_investment=15000,
                marketing_spend=10000,
                wellbeing_spend=5000,
                client_satisfaction_spend=20000,
                growth_focus=20 * (quarter % 5),
            )
            history.append((team, inputs, pool, list(events), team_random(seed, quarter, "t1")))
            team = resolve_quarter(team, inputs, [team], pool, events, level, team_random(seed, quarter, "t1")).team
            if team.is_bankrupt:
                break
        return team, history, level

    def test_conservation_bounds_and_history(self):
        final, history, level = self._play()
        for before, inputs, pool, events, rng in history:
            if before.is_bankrupt:
                break
            resolution = resolve_quarter(before, inputs, [before], pool, events, level, rng)
            after, result = resolution.team, resolution.result
            assert after.cash == before.cash + result.revenue - result.costs
            assert after.cumulative_profit == before.cumulative_profit + result.profit
            assert result.profit == result.revenue - result.costs
            for stat in ("reputation", "burnout", "market_presence"):
                assert 0 <= getattr(after, stat) <= 100
            assert after.staff >= level.min_staff
            assert len(after.quarterly_results) == len(before.quarterly_results) + 1
            assert after.quarterly_results[:-1] == before.quarterly_results
            assert after.agency_metrics[-1].cash == after.cash
            assert after.tech_level >= before.tech_level
            assert all(c.quarters_remaining >= 0 for c in after.clients)
            assert after.quarter == before.quarter + 1

    def test_full_replay_identical(self):
        a, _, _ = self._play(seed=11)
        b, _, _ = self._play(seed=11)
        assert a.to_dict() == b.to_dict()

    def test_input_state_not_mutated(self):
        team = create_initial_team_state("t1", "Acme", 1, LEVEL)
        before = team.to_dict()
        pool = generate_opportunities(1, LEVEL, SeededRandom(1))
        inputs = TeamInputs(pitches=[PitchDecision(pool[0].id, 5, "premium")], hiring_count=2)
        resolve_quarter(team, inputs, [team], pool, [], LEVEL, SeededRandom(2))
        assert team.to_dict() == before
