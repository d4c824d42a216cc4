"""
API routers for Watimage.
"""
