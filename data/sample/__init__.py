"""
Sample documents used to seed the stores.
"""
