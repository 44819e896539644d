"""
BizManage Pro

Business management API with AI-generated business insights.
"""

__version__ = "1.0.0"
