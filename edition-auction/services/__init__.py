"""Auction services: purchase accounting, configuration and queries."""
