"""Jobly: job board API over companies, jobs, users and applications."""

__version__ = "1.0.0"
