"""Jamonería storefront backend: order intake, payments and operator notifications."""

__version__ = "1.0.0"
