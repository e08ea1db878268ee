"""
Conjunctive query model, parser and evaluation engine.
"""
