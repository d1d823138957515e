"""Configuration, static content and the side-panel orchestration."""
