"""Domain layer: declaration grammar, value kinds, flags and comparators.

This layer depends only on stdlib and fieldguard.errors.
It must never import from engine, rules, plugins, or config.
"""
