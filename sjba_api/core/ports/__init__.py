"""Protocol interfaces the components depend on."""
