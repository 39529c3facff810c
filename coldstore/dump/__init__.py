"""Read-only API access: pagination, destinations, devices and users."""
