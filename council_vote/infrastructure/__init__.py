"""Infrastructure layer - logging and test doubles for the vote engine."""
