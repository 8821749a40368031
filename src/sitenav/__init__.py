"""sitenav - Sidebar navigation for documentation sites."""
