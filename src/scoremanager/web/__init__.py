"""Web API for the score manager."""
