"""Account flows and users-table data access."""
