"""
Custom Monopoly game engine.
"""
