"""
Text parser for conjunctive queries.
"""
from .cq_parser import CQParser

__all__ = ['CQParser']
