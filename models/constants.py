"""
Simulation constants for Agency Leadership.
Every coefficient the quarter engine uses lives here so a seeded replay always
runs against the same numbers. Money is in whole pounds; rates are per quarter.
"""
from typing import Dict

# Enumerations (string values survive JSON round-trips unchanged)
SERVICE_LINES: tuple[str, ...] = ("digital", "brand", "social", "content", "pr")
CLIENT_TYPES: tuple[str, ...] = ("startup", "enterprise", "nonprofit", "government")
COMPLEXITIES: tuple[str, ...] = ("low", "medium", "high")
DEADLINES: tuple[str, ...] = ("normal", "urgent", "relaxed")
QUALITY_LEVELS: tuple[str, ...] = ("budget", "standard", "premium")
CLIENT_STATUSES: tuple[str, ...] = ("active", "notice_given")
GAME_LEVELS: tuple[int, ...] = (1, 2, 3)

# ---------------------------------------------------------------------------
# Staffing & capacity
# ---------------------------------------------------------------------------
HOURS_PER_STAFF_PER_QUARTER = 520
STAFF_COST_PER_QUARTER = 12500  # £50k/year
HIRING_COST = 15000
FIRING_COST = 8000  # severance per person
CONTRACT_LENGTH_QUARTERS = 4
QUARTERS_PER_YEAR = 4  # client budgets are annual; they bill a quarter at a time

# Pitching overhead (hours); new business costs more when growth focused
PITCH_HOURS_BASE = 40
PROJECT_HOURS_BASE = 10

# ---------------------------------------------------------------------------
# Pitch win chance
# ---------------------------------------------------------------------------
WIN_CHANCE_FLOOR = 5.0
WIN_CHANCE_CEILING = 95.0  # irreducible 5% loss probability

# Discount: bonus = RATE * d - CURVE * d^2 (diminishing; +20 at the 50% cap)
MAX_DISCOUNT_PERCENT = 50
DISCOUNT_WIN_RATE = 0.6
DISCOUNT_WIN_CURVE = 0.004

REPUTATION_HIGH_TIER = 60  # above: +0.4 per point
REPUTATION_LOW_TIER = 40  # below: -0.4 per point
REPUTATION_WIN_RATE = 0.4
MARKET_PRESENCE_WIN_RATE = 0.1
CAPABILITY_WIN_RATE = 3.0  # per capability level above 1
TECH_SERVICE_LINES: tuple[str, ...] = ("digital", "social")
TRAINING_SERVICE_LINES: tuple[str, ...] = ("brand", "content")

BURNOUT_PITCH_THRESHOLD = 50
BURNOUT_PITCH_RATE = 0.3

GROWTH_FOCUS_STRETCH = 70  # above this the team is spread too thin
GROWTH_FOCUS_WIN_RATE = 0.3

# Quality win modifiers by complexity: premium pays off on hard work, budget hurts it
QUALITY_WIN_MODIFIERS: Dict[str, Dict[str, float]] = {
    "premium": {"low": 4.0, "medium": 8.0, "high": 12.0},
    "standard": {"low": 0.0, "medium": 0.0, "high": 0.0},
    "budget": {"low": -2.0, "medium": -5.0, "high": -10.0},
}

# Existing-client pitches (projects / renewals)
CLIENT_OFFER_DISCOUNT_RATE = 0.3
CLIENT_OFFER_QUALITY_MODIFIERS: Dict[str, float] = {"premium": 5.0, "standard": 0.0, "budget": -3.0}
CLIENT_OFFER_WIN_FLOOR = 50.0

# ---------------------------------------------------------------------------
# Client satisfaction & retention
# ---------------------------------------------------------------------------
STARTING_CLIENT_SATISFACTION = 70
SATISFACTION_CHURN_THRESHOLD = 30  # below: client gives notice
SATISFACTION_RENEW_THRESHOLD = 60  # at or above: client may renew
SATISFACTION_OFFER_THRESHOLD = 45  # at or above: client offers projects / renewals
SATISFACTION_AT_RISK = 40
SATISFACTION_BASE_DECAY = 5.0
SATISFACTION_SPEND_CAP = 25.0  # max boost from client-satisfaction spend
SATISFACTION_SPEND_SCALE = 8.0  # boost = sqrt(spend_per_client / 1000) * scale
OVERWORK_SATISFACTION_THRESHOLD = 1.1
OVERWORK_SATISFACTION_RATE = 30.0
BURNOUT_SATISFACTION_THRESHOLD = 50
BURNOUT_SATISFACTION_RATE = 0.3
GROWTH_FOCUS_SATISFACTION_PENALTY = 10.0  # at focus 100
QUALITY_SATISFACTION_DRIFT: Dict[str, float] = {"premium": 3.0, "standard": 0.0, "budget": -3.0}
RENEWAL_BASE_CHANCE = 0.5
RENEWAL_CHANCE_SPREAD = 80.0  # +1/80 per satisfaction point over the renew threshold

# Delivery cost as a share of a client's quarterly revenue
QUALITY_DELIVERY_COST_RATE: Dict[str, float] = {"premium": 0.10, "standard": 0.0, "budget": 0.0}

# ---------------------------------------------------------------------------
# Burnout
# ---------------------------------------------------------------------------
COMFORTABLE_UTILIZATION_LOW = 0.6
COMFORTABLE_UTILIZATION_HIGH = 0.9
BURNOUT_UTILIZATION_STEPS: tuple[tuple[float, float], ...] = (
    # (utilization above, burnout change); first match wins
    (1.3, 15.0),
    (1.1, 8.0),
    (COMFORTABLE_UTILIZATION_HIGH, 3.0),
)
BURNOUT_UNDERUSED_RELIEF = -5.0
BURNOUT_CALM_FOCUS = 30  # growth focus below this calms the team
BURNOUT_CALM_RELIEF = -2.0
BURNOUT_GROWTH_RATE = 0.3
WELLBEING_RELIEF_STEPS: tuple[tuple[int, float], ...] = (
    (30000, -12.0),
    (15000, -7.0),
    (5000, -3.0),
)
BURNOUT_PER_FIRING = 3.0
BURNOUT_PER_PREMIUM_PITCH = 1.5
BURNOUT_SEVERE = 70  # reputation penalty next quarter

# ---------------------------------------------------------------------------
# Reputation
# ---------------------------------------------------------------------------
REPUTATION_PER_NEW_CLIENT = 3.0
REPUTATION_PER_CLIENT_OFFER = 1.0
REPUTATION_QUALITY: Dict[str, float] = {"premium": 2.0, "standard": 0.0, "budget": -1.0}
REPUTATION_OVERWORK_STEPS: tuple[tuple[float, float], ...] = (
    (1.3, -8.0),
    (1.1, -3.0),
)
REPUTATION_SEVERE_BURNOUT_PENALTY = -5.0
REPUTATION_TRAINING_THRESHOLD = 20000
REPUTATION_TRAINING_BONUS = 3.0
REPUTATION_PER_CHURN = -2.0

# ---------------------------------------------------------------------------
# Capabilities & market presence
# ---------------------------------------------------------------------------
TECH_INVESTMENT_STEPS: tuple[tuple[int, float], ...] = ((40000, 0.5), (25000, 0.3), (10000, 0.15))
TRAINING_INVESTMENT_STEPS: tuple[tuple[int, float], ...] = ((30000, 0.4), (15000, 0.2), (5000, 0.1))
CAPABILITY_DIMINISHING = 4.0  # gain scaled by D / (D + level - 1)
TRAINING_FIRING_THRESHOLD = 2
TRAINING_FIRING_PENALTY = 0.2
CAPABILITY_MIN_LEVEL = 1.0

MARKET_PRESENCE_BASE_TARGET = 10.0
MARKET_PRESENCE_PER_MARKETING = 1.0 / 2000  # +1 target point per £2k
MARKET_PRESENCE_GROWTH_RATE = 0.15  # target points per growth-focus point
MARKET_PRESENCE_DRIFT = 0.35
MARKET_PRESENCE_PER_NEW_CLIENT = 2.0

# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------
SCORE_PROFIT_WEIGHT = 40.0
SCORE_REPUTATION_WEIGHT = 0.20
SCORE_CLIENT_WEIGHT = 15.0
SCORE_CASH_WEIGHT = 10.0
SCORE_WELLBEING_WEIGHT = 0.15

LOW_CASH_WARNING = 50000

# ---------------------------------------------------------------------------
# Opportunity generation
# ---------------------------------------------------------------------------
# complexity -> (min hours, max hours, base win chance)
COMPLEXITY_PROFILES: Dict[str, tuple[int, int, float]] = {
    "low": (100, 200, 65.0),
    "medium": (200, 400, 50.0),
    "high": (350, 600, 35.0),
}
CLIENT_WIN_MODIFIERS: Dict[str, float] = {
    "startup": 0.0,
    "enterprise": -5.0,  # pickier
    "nonprofit": 0.0,
    "government": -3.0,  # want lower prices
}
OPPORTUNITY_WIN_FLOOR = 20.0
OPPORTUNITY_WIN_CEILING = 80.0
URGENT_CHANCE = 0.2
URGENT_BUDGET_MULTIPLIER = 1.15
URGENT_WIN_MODIFIER = -5.0
OPPORTUNITY_QUARTER_STEP = 3  # one extra opportunity every third quarter

# Existing-client offers
PROJECT_BASE_CHANCE = 0.3
PROJECT_CHANCE_PER_POINT = 0.01
PROJECT_BUDGET_SHARE = (0.15, 0.40)
PROJECT_MIN_BUDGET = 25000
PROJECT_HOURLY_RATE = 400
PROJECT_MIN_HOURS = 50
CLIENT_OFFER_BASE_WIN = 70.0
CLIENT_OFFER_WIN_PER_POINT = 0.45

STARTUP_NAMES: tuple[str, ...] = (
    "NeoTech Labs", "Quantum Leap", "DataStream", "CloudPulse", "ByteForge",
    "InnovateCo", "FutureStack", "TechNova", "CodeSprint", "AgileWorks",
    "Pixel Perfect", "Starlight Ventures", "Momentum AI", "Velocity Labs", "Ignite Digital",
)
ENTERPRISE_NAMES: tuple[str, ...] = (
    "GlobalCorp Industries", "Meridian Holdings", "Atlas International", "Pinnacle Group",
    "Sovereign Systems", "Apex Enterprises", "Titan Industries", "Nexus Corporation",
    "Vanguard Solutions", "Sterling & Partners", "Monarch Financial", "Empire Logistics",
)
NONPROFIT_NAMES: tuple[str, ...] = (
    "Hope Foundation", "Green Earth Alliance", "Youth Forward", "Community First",
    "Healing Hands", "Education For All", "Wildlife Trust", "Ocean Guardians",
    "Arts United", "Health Bridge", "Food Bank Network", "Shelter Now",
)
GOVERNMENT_NAMES: tuple[str, ...] = (
    "Department of Transport", "NHS Trust", "City Council", "Environment Agency",
    "Education Authority", "Regional Development", "Public Health England",
    "Heritage Foundation", "Skills & Employment", "Digital Services",
)
CLIENT_NAME_POOLS: Dict[str, tuple[str, ...]] = {
    "startup": STARTUP_NAMES,
    "enterprise": ENTERPRISE_NAMES,
    "nonprofit": NONPROFIT_NAMES,
    "government": GOVERNMENT_NAMES,
}
