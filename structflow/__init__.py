"""
StructFlow — drainage pipe design checks.

Parameter intake (merge + validate) feeding deterministic hydraulic and
structural calculators. Pure Python math in the core; the LLM connector
and the HTTP API sit around it.
"""
