"""Feature packages: matches, scoring, benchmarks and analysis."""
