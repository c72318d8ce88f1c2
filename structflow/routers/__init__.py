"""
HTTP routers for the StructFlow API.
"""
