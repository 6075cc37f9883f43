"""Board model, fleet placement and shot rules."""
