"""Knowledge graph extraction and unification from the command line.

Extract a graph from a markdown file and save it:
    poetry run python scripts/run_graph_extraction.py --input notes/apollo.md

Extract, then connect disconnected clusters:
    poetry run python scripts/run_graph_extraction.py --input notes/apollo.md --unify

Unify a previously exported graph:
    poetry run python scripts/run_graph_extraction.py --graph output/graphs/apollo.json --unify

Only report structural issues and clusters:
    poetry run python scripts/run_graph_extraction.py --graph output/graphs/apollo.json --validate-only
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from knowledge_nexus.graph import GraphError, dump_graph_json
from knowledge_nexus.graph.graphml import write_graphml
from knowledge_nexus.services import GraphSession

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = Path("output/graphs")


def log_progress(state) -> None:
    logger.info("Refinement: %s", state.value)


def report_structure(session: GraphSession) -> None:
    """Log validation issues and the component count of the current graph."""
    validation = session.validate()
    components = session.components()
    logger.info(
        "Graph: %d nodes, %d links, %d cluster(s)",
        len(session.graph.nodes),
        len(session.graph.links),
        len(components),
    )
    if validation.is_valid:
        logger.info("No structural issues found")
    for issue in validation.issues:
        logger.warning("  %s", issue)
    for index, component in enumerate(components, start=1):
        logger.info("  Cluster %d: %d node(s)", index, len(component))


async def run(args: argparse.Namespace) -> int:
    session = GraphSession()

    if args.input:
        path = Path(args.input)
        session.check_upload_filename(path.name)
        logger.info("Extracting graph from %s", path)
        await session.load_text(path.read_text(encoding="utf-8"), path.stem)
        logger.info(
            "Extraction took %d ms", session.stats.processing_time_ms if session.stats else 0
        )
    else:
        path = Path(args.graph)
        logger.info("Loading graph from %s", path)
        session.import_json(path.read_text(encoding="utf-8"), path.name)

    report_structure(session)
    if args.validate_only:
        return 0

    if args.unify:
        stats = await session.refine(on_progress=log_progress)
        logger.info(
            "Added %d link(s); clusters %d -> %d",
            stats.added_links,
            stats.before.clusters,
            stats.after.clusters,
        )

    export = session.export()
    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / export.filename
    output_path.write_text(dump_graph_json(export.graph))
    logger.info("Saved graph to %s", output_path)

    if args.graphml:
        graphml_path = output_path.with_suffix(".graphml")
        write_graphml(export.graph, graphml_path)
        logger.info("Saved GraphML to %s", graphml_path)

    return 0


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Extract, validate and unify knowledge graphs.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--input", type=str, help="Markdown or text document to extract a graph from"
    )
    source.add_argument("--graph", type=str, help="Exported graph JSON to load")
    parser.add_argument(
        "--unify",
        action="store_true",
        help="Connect disconnected clusters with model-proposed links",
    )
    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Report structural issues and clusters without writing output",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=str(DEFAULT_OUTPUT_DIR),
        help=f"Output directory (default: {DEFAULT_OUTPUT_DIR})",
    )
    parser.add_argument(
        "--graphml", action="store_true", help="Also write a GraphML file"
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        return asyncio.run(run(args))
    except GraphError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
