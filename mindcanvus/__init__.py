"""MindCanvus blogging and social API."""
