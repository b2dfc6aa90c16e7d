"""Endpoint modules for the SingleWave subscriber API."""
