"""Constants for opportunity routes."""

DEFAULT_LIST_LIMIT = 50
MAX_LIST_LIMIT = 500
OPPORTUNITY_NOT_FOUND_DETAIL = "Opportunity not found"
