"""
Sample data package.
"""
