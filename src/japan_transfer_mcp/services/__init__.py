"""Station lookup and route search pipeline."""
