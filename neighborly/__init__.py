"""Activity and notification aggregation engine for neighborhood communities."""
