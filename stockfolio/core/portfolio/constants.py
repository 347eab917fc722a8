"""
Central portfolio constants.

Simulation bounds and percentage scaling are defined here as the single
source of truth. Import from this module instead of hardcoding values.
"""

from decimal import Decimal

# --- Percentages ---
PERCENT = Decimal("100")

# --- Growth Simulator ---
# Annualized rate drawn uniformly from [-10%, +20%], applied monthly
SIM_MIN_ANNUAL_RATE = -0.10
SIM_MAX_ANNUAL_RATE = 0.20
MONTHS_PER_YEAR = 12

# Default offered by the CLI
SIM_DEFAULT_MONTHS = 12
