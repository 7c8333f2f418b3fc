"""Typed models for suggest payloads and parsed route search results."""
