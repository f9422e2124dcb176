"""
Monthly Sales Forecasting

Predicts next month's best-selling product category with a classifier
selected from several candidate trainers, and forecasts per-category
revenue for a target month with a pooled LightGBM regression model.
"""

__version__ = "1.0.0"
__author__ = "Forecasting Team"
