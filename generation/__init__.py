"""
Generation of starting teams and quarterly client opportunities for Agency Leadership.
"""
from .initial_state import create_initial_team_state, get_starting_values_summary
from .opportunities import generate_client_offers, generate_opportunities

__all__ = [
    "create_initial_team_state",
    "get_starting_values_summary",
    "generate_client_offers",
    "generate_opportunities",
]
