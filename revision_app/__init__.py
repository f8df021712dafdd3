"""Streamlit review client for the revision scheduler."""
