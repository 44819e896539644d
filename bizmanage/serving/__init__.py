"""
HTTP serving layer.
"""
