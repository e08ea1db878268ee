import sys
import os
import argparse
import logging
from cqengine.datalog.engine.database import CQDatabase
from cqengine.datalog.engine.writer import ResultWriter
from cqengine.datalog.engine.result import QueryResult
from cqengine.datalog.engine.config import config


def print_table(results, header=None):
    # Print query results using the QueryResult API
    if results is None:
        print("    [no results - query was rejected]")
        return

    if isinstance(results, bool):
        print(f"    {results}")
        return

    if not isinstance(results, QueryResult):
        print("    [ERROR: results object is not a QueryResult]")
        logger.error(f"Print table received invalid results type: {type(results)}")
        return

    columns = results.columns()
    logger.debug(f"[PRINT_TABLE] num_rows: {results.num_rows()}")
    logger.debug(f"[PRINT_TABLE] columns: {columns}")

    if results.is_empty():
        print("    [no results - empty result]")
        return

    # Print header and rows for non-empty results
    print("    " + " | ".join(str(col) for col in columns))
    print("    " + "-+-".join('-' * len(str(col)) for col in columns))
    for row in results.tuples:
        print("    " + " | ".join(str(value) for value in row))

# Level and handler are set from CQ_DEBUG when cqengine is imported
logger = logging.getLogger("cqengine")


def main():
    # Parse command line arguments
    parser = argparse.ArgumentParser(description="Conjunctive query evaluation script (GYO + Yannakakis)")
    parser.add_argument(
        "--config",
        type=str,
        default="config/cq.yaml",
        help="Path to configuration file")
    parser.add_argument(
        "--queries-file",
        type=str,
        default="test_data/queries.cq",
        help="Path to a file of conjunctive queries, each ending with '.'")
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="CSV file for the results (defaults to output.path from the configuration)")
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar while evaluating")

    args = parser.parse_args()

    print("[cq_eval] Starting conjunctive query evaluation.")

    # Load configuration from file if specified
    if os.path.exists(args.config):
        print(f"Loading configuration from {args.config}")
        config.load_from_file(args.config)
    else:
        print(f"Configuration file {args.config} not found. Using default configuration.")
    if args.progress:
        config.set("evaluation.show_progress", True)

    db = CQDatabase()
    try:
        db.load_relations_from_config()
    except (OSError, ValueError) as e:
        print(f"Error loading relations: {e}")
        sys.exit(1)
    print(f"Loaded relations: {db.relation_names()}")

    with open(args.queries_file, "r") as f:
        texts = CQDatabase.split_query_text(f.read())
    print(f"Evaluating {len(texts)} queries from {args.queries_file}")

    outcomes = db.evaluate_batch(texts)
    for outcome in outcomes:
        print(f"\n-- Query {outcome.query_id}: {outcome.text}")
        if outcome.error is not None:
            print(f"    [rejected] {type(outcome.error).__name__}: {outcome.error}")
        print_table(outcome.answer)

    output_path = args.output or config.get("output.path", "output.csv")
    with ResultWriter(output_path) as writer:
        writer.write_results(outcomes)
    print(f"\nResults written to {output_path}")

if __name__ == "__main__":
    main()
