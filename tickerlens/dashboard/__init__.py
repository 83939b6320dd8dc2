"""Streamlit dashboard: ticker search, sentiment verdict and the four financial chart panels."""
