"""Labor capacity forecasting engine.

Forecasts weekly labor demand from scheduled and quoted project phases,
compares it with workforce supply, and turns the resulting deficits into
staffing recommendations and hiring plans.
"""
