import logging
# AST dumps stay quiet even under CQ_DEBUG=DEBUG
logger = logging.getLogger("cqengine.parser")
logger.setLevel(logging.WARNING)

from lark import Lark, Transformer
from lark.exceptions import LarkError

from ..engine.exceptions import QueryParseError

cq_grammar = r"""
// -----------------------------
// Top-Level: one or more conjunctive queries
// -----------------------------
?start: queries
queries: query+

// -----------------------------
// Query: head ":-" body "."
// An empty body is allowed (always true)
// -----------------------------
query: head ":-" body? "."

// The head is a relation atom; Answer() makes a Boolean query
head: pred_atom

// Body: one or more atoms separated by commas
body: pred_atom ("," pred_atom)*

// Relation atom: RELATION "(" [ term_list ] ")"
pred_atom: RELATION "(" term_list? ")"

// Term list: one or more terms separated by commas
term_list: term ("," term)*

// A term is either a variable, a number or a quoted string
?term: VARIABLE           // e.g. x, brewid, u10
     | NUMBER             // e.g. 123, -4, 2.5
     | STRING             // e.g. 'Westmalle'

// Tokens (lexical items)
RELATION: /[A-Z][A-Za-z0-9_]*/
VARIABLE: /[a-z]+[0-9]*/
NUMBER:   /-?[0-9]+(\.[0-9]+)?/
// Accept both double-quoted and single-quoted strings
STRING:   /("([^"\\]|\\.)*")|('([^'\\]|\\.)*')/

%ignore /%[^\n]*/
%ignore /#[^\n]*/
%import common.WS
%ignore WS
"""


def _token_to_term(tok):
    """Turn a VARIABLE / NUMBER / STRING token into an AST term dict."""
    if tok.type == "VARIABLE":
        return {"type": "variable", "name": str(tok)}
    if tok.type == "NUMBER":
        text = str(tok)
        value = float(text) if "." in text else int(text)
        return {"type": "number", "value": value}
    if tok.type == "STRING":
        quote = tok[0]
        s = tok[1:-1].replace("\\" + quote, quote).replace("\\\\", "\\")
        return {"type": "string", "value": s}
    raise QueryParseError(f"Unexpected token {tok!r}")


class CQTransformer(Transformer):
    """
    Transforms a Lark parse tree into a simple AST represented by nested Python dicts.
    """

    def queries(self, items):
        logger.debug("Entering queries with %d items", len(items))
        return {"type": "program", "queries": items}

    def query(self, items):
        logger.debug("Entering query with items: %s", items)
        head = items[0]
        body = items[1] if len(items) > 1 else []
        result = {"type": "query", "head": head, "body": body}
        logger.debug("query result: %s", result)
        return result

    def head(self, items):
        return items[0]

    def body(self, items):
        return list(items)

    def pred_atom(self, items):
        name = str(items[0])
        terms = items[1] if len(items) == 2 else []
        result = {"type": "atom", "name": name, "terms": terms}
        logger.debug("pred_atom result: %s", result)
        return result

    def term_list(self, items):
        return [_token_to_term(tok) for tok in items]


class CQParser:
    def __init__(self):
        self.parser = Lark(cq_grammar, parser="earley")
        self.transformer = CQTransformer()

    def parse(self, text):
        """Parse one or more queries into {"type": "program", "queries": [...]}."""
        logger.debug("Starting parse for text:\n%s", text)
        try:
            parse_tree = self.parser.parse(text)
            ast = self.transformer.transform(parse_tree)
        except LarkError as e:
            raise QueryParseError(f"Cannot parse query text: {e}") from e
        logger.debug("Final AST:\n%s", ast)
        return ast

    def parse_one(self, text):
        """Parse text holding exactly one query and return its AST dict."""
        ast = self.parse(text)
        queries = ast["queries"]
        if len(queries) != 1:
            raise QueryParseError(f"Expected exactly one query, found {len(queries)}.")
        return queries[0]
