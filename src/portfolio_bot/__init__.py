"""MEXC portfolio monitor with threshold alerts and step-aware auto-trim."""

__version__ = "0.1.0"
