"""Configuration and the HTTP client for the transit site."""
