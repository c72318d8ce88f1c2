"""
Data adapters — everything that turns JSON into a DesignSchema and a
SimulationResult back into JSON or text.
"""
