"""
Leftover Chef: recipe recommendations from the ingredients you already have.
"""
