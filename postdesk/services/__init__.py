"""Remote store adapters and the mock posts API."""
