"""Tasks, projects, goals, comments and API tokens."""
