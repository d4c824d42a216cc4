"""
API layer: exceptions, dependencies and routers.
"""
