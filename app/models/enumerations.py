from enum import Enum

class Quadrant(str, Enum):
    QUICK_WIN = "Quick Win"          # High impact, low effort
    STRATEGIC_BET = "Strategic Bet"  # High impact, high effort
    EXPERIMENTAL = "Experimental"    # Low impact, low effort
    WATCHLIST = "Watchlist"          # Low impact, high effort

class LibraryTier(str, Enum):
    ACTIVE = "active"        # Client portfolio
    REFERENCE = "reference"  # Library only

class LibrarySource(str, Enum):
    INTERNAL = "internal"
    INDUSTRY_STANDARD = "industry_standard"
    AI_INVENTORY = "ai_inventory"

class UseCaseStatus(str, Enum):
    DISCOVERY = "Discovery"
    BACKLOG = "Backlog"
    IN_FLIGHT = "In-flight"
    IMPLEMENTED = "Implemented"
    ON_HOLD = "On Hold"

class ResponseStatus(str, Enum):
    STARTED = "started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

class FocusArea(str, Enum):
    AUTOMATION = "automation"
    CUSTOMER_EXPERIENCE = "customer_experience"
    RISK_MANAGEMENT = "risk_management"

class MaturityCategory(str, Enum):
    STRATEGY = "strategy"
    GOVERNANCE = "governance"
    IMPLEMENTATION = "implementation"

class MaturityLevel(str, Enum):
    INITIAL = "Initial"
    REPEATABLE = "Repeatable"
    DEFINED = "Defined"
    MANAGED = "Managed"
    OPTIMIZED = "Optimized"

class RecommendationOrder(str, Enum):
    CATALOG = "catalog"  # First matches in catalog order
    SCORE = "score"      # Highest match score first (stable)
