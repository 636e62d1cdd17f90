"""Core settings, security and cross-cutting helpers."""
