"""Revision scheduler core: memory model, card store and review services."""
