"""
Deterministic section calculators.

Pure Python math, no I/O. Each calculator takes one section of an
Estimate, applies a single field change and re-derives every computed
field; aggregation folds the three sections into the grand total.
"""
