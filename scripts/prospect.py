#!/usr/bin/env python3
"""
Run one prospecting search from the shell and print the extracted leads.

Usage:
  python scripts/prospect.py --kind region "Moema, São Paulo"
  python scripts/prospect.py --kind broker Curitiba --whatsapp
  python scripts/prospect.py --kind region --lat -23.56 --lng -46.65

Environment you might set:
  GEMINI_API_KEY=<key>
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Ensure repository root is on sys.path so `partnerhub.*` can be imported
_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from partnerhub.errors import MissingPhoneError, PartnerHubError  # noqa: E402
from partnerhub.oracle_client import OracleClient  # noqa: E402
from partnerhub.outreach import whatsapp_link  # noqa: E402
from partnerhub.prospecting import GeoPoint, SearchKind, SearchRequest  # noqa: E402
from partnerhub.prospector import ProspectingSession  # noqa: E402
from partnerhub.storage import RecentSearches, build_store  # noqa: E402

log = logging.getLogger("prospect")


async def _run(args: argparse.Namespace) -> int:
    geo = GeoPoint(args.lat, args.lng) if args.lat is not None and args.lng is not None else None
    request = SearchRequest(kind=SearchKind(args.kind), query_text=" ".join(args.query), geo=geo)
    session = ProspectingSession(OracleClient(), recent=RecentSearches(build_store()))
    try:
        outcome = await session.search(request)
    except PartnerHubError as exc:
        log.error("%s", exc)
        return 1
    if outcome is None:
        return 1

    for i, lead in enumerate(outcome.leads):
        print(f"[{i}] {lead.name} | {lead.address} | {lead.phone or '-'} | {lead.registry_type.value}")
        if lead.website:
            print(f"     site: {lead.website}")
        if args.whatsapp:
            try:
                print(f"     whatsapp: {whatsapp_link(lead, request.kind)}")
            except MissingPhoneError:
                pass
    for c in outcome.result.citations:
        print(f"fonte ({c.kind.value}): {c.title} {c.uri}")
    if not outcome.leads:
        print(outcome.result.raw_text)
    return 0


def main() -> int:
    ap = argparse.ArgumentParser(description="Prospect real-estate partners through the grounded oracle")
    ap.add_argument("query", nargs="*", help="Region, company name, phone, e-mail or website")
    ap.add_argument("--kind", choices=[k.value for k in SearchKind], default=SearchKind.REGION.value)
    ap.add_argument("--lat", type=float, default=None)
    ap.add_argument("--lng", type=float, default=None)
    ap.add_argument("--whatsapp", action="store_true", help="Print a click-to-chat link per lead")
    args = ap.parse_args()
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s :: %(message)s")
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
