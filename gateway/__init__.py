"""NetSuite API gateway."""
