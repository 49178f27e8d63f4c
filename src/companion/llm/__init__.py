"""LLM client package."""
