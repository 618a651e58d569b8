"""Engine layer: compiler, cache, trigger selection, executor and facade.

The engine may import from domain and config.models.
It must never import from cli.
"""
