"""Domain layer for the activity and notification engine."""
