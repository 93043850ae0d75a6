"""Champion benchmarks: storage, lookup and comparison."""
