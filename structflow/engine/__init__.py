"""
Simulation engine — deterministic hydraulic and structural checks.

Pure Python math. No AI, no I/O.
Closed-form formulas only (Manning, simplified ring theory).
"""
