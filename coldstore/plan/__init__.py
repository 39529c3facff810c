"""Selection of cold storage archives for a new purge date."""
