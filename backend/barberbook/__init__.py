"""Barbershop booking validation and availability engine."""

__version__ = "0.1.0"
