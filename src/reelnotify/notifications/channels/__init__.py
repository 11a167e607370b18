"""Delivery channels for status cards."""
