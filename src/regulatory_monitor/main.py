"""Main entry point for the regulatory monitor."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .agent.monitor_agent import MonitorAgent
from .config.loader import load_config


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Regulatory website monitor: classify pages and track material changes"
    )
    parser.add_argument(
        "-c",
        "--config",
        default="config/config.yaml",
        help="Path to config file (YAML or JSON)",
    )
    parser.add_argument(
        "--cycles",
        type=int,
        default=1,
        help="Number of crawl cycles to run",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args(argv)

    # Resolve paths relative to the project root
    project_root = Path(__file__).resolve().parent.parent.parent
    config_path = Path(args.config)
    if not config_path.is_absolute() and not config_path.exists():
        config_path = project_root / config_path

    if not config_path.exists():
        print(f"Config not found: {config_path}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    config = load_config(config_path)
    store = config.store
    if not Path(store.base_path).is_absolute():
        store.base_path = str(project_root / store.base_path)
    if not Path(store.db_path).is_absolute():
        store.db_path = str(project_root / store.db_path)
    dictionaries = config.classifier.term_dictionaries_path
    if dictionaries and not Path(dictionaries).is_absolute():
        config.classifier.term_dictionaries_path = str(project_root / dictionaries)

    agent = MonitorAgent(config)
    pages = asyncio.run(agent.run(cycles=args.cycles))
    print(f"Monitored {len(pages)} pages.")
    print(agent.get_statistics())
    return 0


if __name__ == "__main__":
    sys.exit(main())
