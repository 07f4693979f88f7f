"""Daily outreach quota allocation service."""
