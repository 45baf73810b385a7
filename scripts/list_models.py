#!/usr/bin/env python3
"""
Model Listing Script

Registers every provider with configured credentials and prints the
status of the models in one category, or the chat models selected by a
requirement string.

Usage:
    python scripts/list_models.py                          # Chat models
    python scripts/list_models.py --category embedding     # Another category
    python scripts/list_models.py --by-provider            # Group by provider
    python scripts/list_models.py --select "auto:intelligence>=4"
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from model_catalog.config import configure_logging, get_settings
from model_catalog.errors import CatalogError
from model_catalog.providers import auto_config, register_providers
from model_catalog.registry.catalog import CATEGORIES, ModelRegistry, get_model_registry
from model_catalog.registry.selection import estimate_price, requested_context_length, parse_requirements


def print_statuses(title: str, statuses: dict) -> None:
    print(f"\n{title}")
    print("-" * 60)
    if not statuses:
        print("  (none)")
    for key, status in statuses.items():
        print(f"  {status.status.value:<8} {key}")


async def show_category(registry: ModelRegistry, category: str, by_provider: bool) -> None:
    models = registry.category(category)
    if by_provider:
        for provider, statuses in (await models.models_by_provider()).items():
            print_statuses(f"{category} / {provider}", statuses)
    else:
        print_statuses(f"{category} ({len(models)} models)", await models.all_statuses())


async def show_selection(registry: ModelRegistry, requirements: str) -> None:
    parsed = parse_requirements(requirements, registry.chat)
    context_length = requested_context_length(parsed)

    print(f"\nModels matching '{requirements}' (cheapest first)")
    print("-" * 60)
    for spec in registry.filter_chat_models(requirements):
        print(f"  {estimate_price(spec, context_length):>14,.2f}  {spec.key}")

    client = await registry.get_first_online_chat_client(requirements)
    print(f"\nSelected: {client.model_spec.key}")


async def run(args: argparse.Namespace) -> None:
    settings = get_settings()
    configure_logging(settings)

    registry = get_model_registry()
    registered = await register_providers(registry, auto_config(settings))
    print(f"Providers: {', '.join(registered) or 'none'}")

    if args.select:
        await show_selection(registry, args.select)
    else:
        await show_category(registry, args.category, args.by_provider)


def main():
    """Main entry point for the model listing script."""

    parser = argparse.ArgumentParser(
        description="List catalog models and their online status",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/list_models.py                               Chat models
  python scripts/list_models.py --category transcription      Another category
  python scripts/list_models.py --by-provider                 Group by provider
  python scripts/list_models.py --select "auto:speed>=4"      Pick a chat model
        """
    )

    parser.add_argument(
        "--category",
        default="chat",
        choices=CATEGORIES,
        help="Model category to list (default: chat)"
    )
    parser.add_argument(
        "--by-provider",
        action="store_true",
        help="Group models by provider"
    )
    parser.add_argument(
        "--select",
        metavar="REQUIREMENTS",
        help="Rank chat models by a requirement string and pick the first online one"
    )

    args = parser.parse_args()

    try:
        asyncio.run(run(args))
    except CatalogError as e:
        print(f"ERROR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
