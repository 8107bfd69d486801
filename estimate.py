#!/usr/bin/env python3
"""
Resale Pricer - Suggest a resale price from comparable eBay listings

Usage:
    python estimate.py --brand Apple --model "iPhone 12" --category electronics --condition good
    python estimate.py --model "Bamboo side table" --category furniture --condition 7 --profit
    python estimate.py --category tools --brand DeWalt --manual --json
"""

import sys
import json
import asyncio
import argparse
import logging
from typing import Optional, List

from pricing import ItemDescription, Condition, estimate_price, analyze_resale, PriceEstimate
from pricing.profit import ProfitAnalysis
from providers import EbayConfig, EbayBrowseProvider, ConfigError


def parse_rating(value: Optional[str]):
    """Numeric ratings become floats, labels stay strings"""
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Suggest a resale price from comparable eBay listings'
    )
    parser.add_argument('--brand', help='Brand (e.g., "Apple")')
    parser.add_argument('--model', help='Model (e.g., "iPhone 12")')
    parser.add_argument('--category', help='Category (e.g., "electronics")')
    parser.add_argument('--description', help='Free-text description of the item')
    parser.add_argument('--condition',
                       help='Condition label (excellent/good/fair/poor) or 1-10 rating')
    parser.add_argument('--not-usable', action='store_true',
                       help='Item needs repair before it can be used')
    parser.add_argument('--manual', action='store_true',
                       help='Use category heuristics instead of eBay')
    parser.add_argument('--fallback', action='store_true',
                       help='Fall back to the manual estimate when eBay has no price')
    parser.add_argument('--profit', action='store_true',
                       help='Show fees, shipping and net profit')
    parser.add_argument('--json', action='store_true',
                       help='Print the estimate as JSON')
    parser.add_argument('--verbose', '-v', action='store_true',
                       help='Debug logging')
    return parser


def item_from_args(args: argparse.Namespace) -> ItemDescription:
    return ItemDescription(
        brand=args.brand,
        model=args.model,
        category=args.category,
        description=args.description,
        condition=Condition(
            rating=parse_rating(args.condition),
            usable_as_is=not args.not_usable
        )
    )


def format_estimate(result: PriceEstimate, analysis: Optional[ProfitAnalysis] = None) -> str:
    """Human-readable summary of an estimate"""
    lines = [
        "📊 PRICING RESULTS:",
        "==================",
    ]
    if result.search_query is not None:
        lines.append(f"🔍 Search query: \"{result.search_query}\"")

    suggested = f"${result.suggested}" if result.suggested is not None else "N/A"
    lines.append(f"💰 Suggested price: {suggested}")
    lines.append(f"🎯 Confidence: {result.confidence}")
    lines.append(f"📋 Sample size: {result.sample_size or 0}")
    lines.append(f"🏷️  Source: {result.source}")

    if result.reason:
        lines.append(f"ℹ️  {result.reason}")

    if result.price_range:
        lines.append(f"📈 Price range: ${result.price_range.min:.2f} - ${result.price_range.max:.2f}")
        lines.append(f"📊 Median: ${result.price_range.median:.2f}, average: ${result.price_range.average:.2f}")

    if result.comparable_items:
        lines.append("\n🔗 Comparable items:")
        for i, item in enumerate(result.comparable_items, 1):
            lines.append(f"{i}. ${item.price:.2f} - {item.title[:60]}")
            lines.append(f"   Condition: {item.condition or 'Not specified'}")
            lines.append(f"   URL: {item.url}")

    if analysis:
        lines.append("\n💵 PROFIT ANALYSIS:")
        lines.append("===================")
        lines.append(f"Sale price: ${analysis.sale_price:.2f}")
        lines.append(f"eBay fees: ${analysis.fees:.2f}")
        lines.append(f"Shipping: ${analysis.shipping_cost:.2f}")
        lines.append(f"Net profit: ${analysis.net_profit:.2f}")
        lines.append("✅ Profitable item!" if analysis.is_profitable else "❌ Not profitable after fees")

    return "\n".join(lines)


async def run(args: argparse.Namespace) -> int:
    item = item_from_args(args)

    provider = None
    if not args.manual:
        try:
            provider = EbayBrowseProvider(EbayConfig.from_env().validate())
        except ConfigError as e:
            print(f"❌ {e}", file=sys.stderr)
            print("Set them in .env or use --manual", file=sys.stderr)
            return 2

    result = await estimate_price(
        item,
        provider=provider,
        source="manual" if args.manual else "ebay",
        fallback_to_manual=args.fallback
    )
    analysis = analyze_resale(result, item) if args.profit else None

    if args.json:
        data = result.to_dict()
        if args.profit:
            data['profit'] = analysis.to_dict() if analysis else None
        print(json.dumps(data, indent=2))
    else:
        print(format_estimate(result, analysis))

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
