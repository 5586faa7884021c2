"""
Initial team state for Agency Leadership.
Every team starts with identical numbers and the same six retainer clients;
only the company name differs. Contract lengths scale with game length so
each starter client reaches at least one renewal decision.
"""
from models.client import ActiveClient
from models.config import DEFAULT_MAX_QUARTERS, LevelConfig
from models.constants import HOURS_PER_STAFF_PER_QUARTER
from models.inputs import get_default_inputs
from models.team import TeamState

# (name, type, service line, annual budget, hours per quarter, quarters at 8-quarter length, complexity, satisfaction)
STARTER_CLIENTS: tuple[tuple, ...] = (
    ("TechStart Solutions", "startup", "digital", 100000, 600, 4, "low", 75),
    ("GreenLeaf Foundation", "nonprofit", "social", 100000, 600, 5, "low", 65),
    ("Urban Coffee Co", "startup", "brand", 100000, 600, 3, "low", 80),
    ("Meridian Healthcare", "enterprise", "content", 200000, 1200, 4, "medium", 55),
    ("National Transport Authority", "government", "pr", 200000, 1200, 6, "medium", 70),
    ("GlobalBank International", "enterprise", "digital", 500000, 3000, 4, "high", 60),
)


def scale_contract_length(quarters: int, max_quarters: int) -> int:
    """Scale an 8-quarter contract length to the game length; result in [1, max_quarters - 1]."""
    scaled = int(quarters * max_quarters / DEFAULT_MAX_QUARTERS + 0.5)
    return max(1, min(scaled, max_quarters - 1))


def starter_clients(team_id: str, max_quarters: int = DEFAULT_MAX_QUARTERS) -> list[ActiveClient]:
    return [
        ActiveClient(
            opportunity_id=f"starter-{team_id}-{idx}",
            client_name=name,
            client_type=client_type,
            service_line=service_line,
            budget=budget,
            discount=0.0,
            complexity=complexity,
            hours_per_quarter=hours,
            quarters_remaining=scale_contract_length(quarters, max_quarters),
            won_in_quarter=0,
            quality_level="standard",
            status="active",
            satisfaction_level=satisfaction,
        )
        for idx, (name, client_type, service_line, budget, hours, quarters, complexity, satisfaction)
        in enumerate(STARTER_CLIENTS)
    ]


def create_initial_team_state(
    team_id: str,
    company_name: str,
    team_number: int,
    level_config: LevelConfig,
    max_quarters: int = DEFAULT_MAX_QUARTERS,
) -> TeamState:
    """Fresh team for quarter 1 at the given difficulty."""
    return TeamState(
        team_id=team_id,
        company_name=company_name,
        team_number=team_number,
        quarter=1,
        cash=level_config.starting_cash,
        cumulative_profit=0,
        staff=level_config.starting_staff,
        burnout=float(level_config.starting_burnout),
        reputation=float(level_config.starting_reputation),
        market_presence=float(level_config.starting_market_presence),
        tech_level=1.0,
        training_level=1.0,
        process_level=1.0,
        clients=starter_clients(team_id, max_quarters),
        current_inputs=get_default_inputs(),
    )


def get_starting_values_summary(level_config: LevelConfig, max_quarters: int = DEFAULT_MAX_QUARTERS) -> dict:
    clients = starter_clients("summary", max_quarters)
    annual_revenue = sum(c.revenue for c in clients)
    hours = sum(c.hours_per_quarter for c in clients)
    return {
        "level": level_config.level,
        "cash": level_config.starting_cash,
        "staff": level_config.starting_staff,
        "reputation": level_config.starting_reputation,
        "burnout": level_config.starting_burnout,
        "market_presence": level_config.starting_market_presence,
        "starter_clients": len(clients),
        "annual_retained_revenue": int(annual_revenue),
        "hours_per_quarter": hours,
        "starting_utilization": hours / (level_config.starting_staff * HOURS_PER_STAFF_PER_QUARTER),
    }
