"""Domain layer: values, rules, rule trees, and the tree matcher.

This layer depends only on stdlib and :mod:`paramguard.errors`.
It must never import from services, infrastructure, or config.
"""
