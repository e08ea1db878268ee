"""
Syntax of conjunctive queries: terms, atoms, queries and relation schemas.
"""
