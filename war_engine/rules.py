"""
Rules module for the War card game.
Contains rule constants shared by the resolvers and the presentation metadata.
"""

# Deck constants
TOTAL_CARDS = 52

# War constants
MAX_CONCEALED_CARDS = 3  # face-down cards per side per war round
CARDS_KEPT_FOR_FIGHT = 1

# Presentation metadata (seconds)
BASE_REVEAL_DURATION = 0.5
CONCEALED_CARD_DURATION = 0.1
CARD_FLIP_DURATION = 0.3
WAR_ROUND_PAUSE = 1.0
RESULT_FLOURISH_DURATION = 1.0

# Display pool sizing
MIN_POOL_SIZE = 16
POOL_BUFFER = 4

# Transport defaults
DEFAULT_MIN_DELAY = 0.1
DEFAULT_MAX_DELAY = 0.5
DEFAULT_TIMEOUT_DURATION = 5.0
TIMEOUT_MESSAGE = "Request timeout"

NETWORK_ERROR_MESSAGES = (
    "Connection timeout",
    "Network unreachable",
    "Connection lost",
    "DNS resolution failed",
)

SERVER_ERROR_MESSAGES = (
    "Internal server error",
    "Service unavailable",
    "Database connection failed",
    "Rate limit exceeded",
)


def max_concealed_cards(side_a_count: int, side_b_count: int) -> int:
    """
    Number of concealed cards each side stakes in the next war round.

    Both sides keep one card back for the fighting draw.
    """
    return max(0, min(MAX_CONCEALED_CARDS,
                      side_a_count - CARDS_KEPT_FOR_FIGHT,
                      side_b_count - CARDS_KEPT_FOR_FIGHT))
