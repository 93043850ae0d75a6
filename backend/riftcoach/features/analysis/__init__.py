"""Multi-match player analysis: aggregates, champion profiles, trends and coaching."""
