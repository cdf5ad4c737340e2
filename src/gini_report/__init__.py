"""
Pre-tax vs post-tax income inequality report built on a World Bank Gini
dataset: windowed gap filling per country, then scatter and lollipop charts.
"""

__version__ = "0.1.0"

from .gap_fill import fill, forward_fill, backward_fill

__all__ = ["fill", "forward_fill", "backward_fill"]
