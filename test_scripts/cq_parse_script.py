from cqengine.datalog.parser.cq_parser import CQParser
from cqengine.datalog.engine.exceptions import QueryParseError
import pprint
def main():

    with open("test_data/queries.cq", "r") as f:
        sample_queries = f.read()

    parser = CQParser()

    ast = parser.parse(sample_queries)

    pprint.pprint(ast)

    test_queries = [
        (
            "Single atom",
            r"""
                Answer(x, y) :- R(x, y).
            """,
        ),
        (
            "Constants and repeated variables",
            r"""
                Answer(x) :- R(x, x, 'a'), S(x, 42, -1.5).
            """,
        ),
        (
            "Boolean query",
            r"""
                Answer() :- R(x, y), S(y, z).
            """,
        ),
    ]

    for desc, text in test_queries:
        print(f"--- {desc} ---")
        ast = parser.parse(text)
        pprint.pprint(ast)

    invalid_queries = [
        (
            "Missing final dot (should fail)",
            r"""
                Answer(x) :- R(x)
            """,
        ),
        (
            "Uppercase variable (should fail)",
            r"""
                Answer(X) :- R(X).
            """,
        ),
    ]

    for desc, text in invalid_queries:
        print(f"--- {desc} ---")
        try:
            ast = parser.parse(text)
            pprint.pprint(ast)
        except QueryParseError as e:
            print(f"Error parsing '{desc}': {e}")


if __name__ == "__main__":
    main()
