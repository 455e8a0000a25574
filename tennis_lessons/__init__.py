"""
Tennis Lessons — exploratory analysis and predictive modelling on
professional tennis statistics.

Two linear lessons share one data layer: the EDA lesson summarizes and
charts match and point data, the modelling lesson tunes and compares
classifier families that predict the match winner.
"""

__version__ = "0.1.0"
