#!/usr/bin/env python
"""
Import pages from a git-wiki working tree into TaskWiki.

Every ``*.markdown`` file becomes one page named after the file without its
extension (``ProjectWidgets.markdown`` → ``ProjectWidgets``).

Usage:
    .venv/bin/python scripts/import_pages.py <wiki-dir> [options]

Options:
    --extension EXT   Page file extension (default: .markdown)
    --overwrite       Replace pages that already exist (default: skip them)
    --dry-run         Report without writing to the database

Example:
    .venv/bin/python scripts/import_pages.py ~/wiki --dry-run
    .venv/bin/python scripts/import_pages.py ~/wiki --overwrite
"""

from __future__ import annotations

import argparse
import asyncio
import re
import sys
from pathlib import Path

# Ensure the taskwiki package is importable when run from project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from taskwiki.core.database import create_all_tables, get_session_factory
from taskwiki.schemas import PAGE_NAME_PATTERN
from taskwiki.services import pages as page_svc


_NAME_RE = re.compile(PAGE_NAME_PATTERN)


# ── Import ────────────────────────────────────────────────────────────────────

async def import_pages(wiki_dir: Path, extension: str, overwrite: bool, dry_run: bool) -> None:
    files = sorted(wiki_dir.rglob(f"*{extension}"), key=lambda p: p.name.lower())
    counts = {"created": 0, "updated": 0, "skipped": 0, "error": 0}

    if not dry_run:
        await create_all_tables()

    factory = get_session_factory()
    async with factory() as db:
        for path in files:
            name = path.name[: -len(extension)]
            if not _NAME_RE.match(name):
                print(f"  [!] Skipping '{path}': not a valid page name")
                counts["error"] += 1
                continue

            existing = await page_svc.find_page_or_none(db, name)
            if existing is not None and not overwrite:
                counts["skipped"] += 1
                continue

            print(f"  {'update' if existing else 'create'} {name}")
            if dry_run:
                counts["updated" if existing else "created"] += 1
                continue

            try:
                content = path.read_text(encoding="utf-8")
                await page_svc.save_page(db, name, content)
                counts["updated" if existing else "created"] += 1
            except (OSError, UnicodeDecodeError) as exc:
                print(f"  [!] Error importing '{name}': {exc}")
                counts["error"] += 1

        if not dry_run:
            await db.commit()

    print(
        f"\nImport complete: "
        f"{counts['created']} created, "
        f"{counts['updated']} updated, "
        f"{counts['skipped']} skipped (already exist), "
        f"{counts['error']} errors."
    )


# ── CLI ───────────────────────────────────────────────────────────────────────

def main() -> None:
    parser = argparse.ArgumentParser(
        description="Import pages from a git-wiki working tree into TaskWiki.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("wiki_dir", help="Directory holding the *.markdown page files")
    parser.add_argument("--extension", default=".markdown", metavar="EXT",
                        help="Page file extension (default: .markdown)")
    parser.add_argument("--overwrite", action="store_true",
                        help="Replace pages that already exist")
    parser.add_argument("--dry-run", action="store_true",
                        help="Report without writing to the database")
    args = parser.parse_args()

    wiki_dir = Path(args.wiki_dir).expanduser().resolve()
    if not wiki_dir.is_dir():
        print(f"Error: not a directory: {wiki_dir}", file=sys.stderr)
        sys.exit(1)

    asyncio.run(import_pages(
        wiki_dir=wiki_dir,
        extension=args.extension,
        overwrite=args.overwrite,
        dry_run=args.dry_run,
    ))


if __name__ == "__main__":
    main()
