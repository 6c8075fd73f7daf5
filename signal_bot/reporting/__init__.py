"""Reporting package: static charts."""

from .plots import plot_indicator_chart

__all__ = ["plot_indicator_chart"]
