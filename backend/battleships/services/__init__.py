"""Domain services, kept free of transport concerns."""
