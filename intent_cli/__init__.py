"""
Command line tools for packed user intents.
"""
