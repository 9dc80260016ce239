"""
Structural steel estimator.

Fabrication and erection quote calculator for structural steel, metal
deck and miscellaneous steel, with storage and PDF/Excel exports.
"""
