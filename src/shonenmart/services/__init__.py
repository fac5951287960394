"""Pricing, order orchestration and the clients for external collaborators."""
