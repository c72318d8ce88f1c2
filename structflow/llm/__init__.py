"""
LLM connector — natural language in, overlay JSON out.
"""
