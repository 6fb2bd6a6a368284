"""Restaurant Roulette backend."""
