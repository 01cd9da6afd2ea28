"""Persistence for auction schedules."""
