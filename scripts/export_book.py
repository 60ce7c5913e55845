#!/usr/bin/env python3
"""
Export or restore the partner book without going through the API.

Usage:
  python scripts/export_book.py csv --out parceiros.csv
  python scripts/export_book.py txt
  python scripts/export_book.py json --out backup.json
  python scripts/export_book.py pdf --out relatorio.pdf
  python scripts/export_book.py restore --in backup.json --yes
"""

import argparse
import logging
import sys
from pathlib import Path

# Ensure repository root is on sys.path so `partnerhub.*` can be imported
_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from partnerhub import exports, reports  # noqa: E402
from partnerhub.companies import PartnerBook  # noqa: E402
from partnerhub.errors import PartnerHubError  # noqa: E402
from partnerhub.storage import CompanyRepository, build_store  # noqa: E402

log = logging.getLogger("export_book")


def _write(out: str | None, data) -> None:
    if out is None:
        if isinstance(data, bytes):
            sys.stdout.buffer.write(data)
        else:
            sys.stdout.write(data + "\n")
        return
    path = Path(out)
    if isinstance(data, bytes):
        path.write_bytes(data)
    else:
        path.write_text(data, encoding="utf-8")
    log.info("wrote %s", path)


def main() -> int:
    ap = argparse.ArgumentParser(description="PartnerHub book export/restore")
    ap.add_argument("format", choices=["csv", "txt", "json", "pdf", "geo-pdf", "restore"])
    ap.add_argument("--out", default=None, help="Output file (stdout when omitted)")
    ap.add_argument("--in", dest="infile", default=None, help="Backup file for restore")
    ap.add_argument("--yes", action="store_true", help="Confirm replacing all current data on restore")
    args = ap.parse_args()
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s :: %(message)s")

    book = PartnerBook.bootstrap(CompanyRepository(build_store()))
    try:
        if args.format == "csv":
            _write(args.out, exports.export_csv(book.list()))
        elif args.format == "txt":
            _write(args.out, exports.export_txt(book.list()))
        elif args.format == "json":
            _write(args.out, exports.export_json(book.list()))
        elif args.format == "pdf":
            _write(args.out, reports.summary_pdf(book.list()))
        elif args.format == "geo-pdf":
            _write(args.out, reports.geographic_pdf(book.list()))
        else:
            if not args.infile:
                ap.error("restore needs --in")
            content = Path(args.infile).read_bytes()
            restored = exports.restore_from_json(book, content, confirmed=args.yes)
            log.info("restored %d companies", len(restored))
    except PartnerHubError as exc:
        log.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
