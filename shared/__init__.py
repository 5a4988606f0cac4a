"""
Definitions shared by the engine and the settings document.
"""
