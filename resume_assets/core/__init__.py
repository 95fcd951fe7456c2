"""Configuration, wiring and cross-cutting helpers."""
