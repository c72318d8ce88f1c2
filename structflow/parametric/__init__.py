"""
Parametric core — design parameter model and validator.
"""
