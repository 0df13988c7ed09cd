"""Adapters Layer - concrete implementations of the ports."""
