"""
High-level orchestration of the WordPress → TipTap content migration.

This module defines a :class:`MigrationTool` class that ties together the
extractor, the HTML converter, the audits and the utilities.  It covers
both call sites of the converter: post migration (no tables) and page
migration (tables enabled).  Each run loads the extracted ``posts.json`` /
``pages.json`` and the media URL map, converts every item on a thread pool
sharing one read-only :class:`UrlRewriteTable`, writes the converted
records and logs what happened.

Configuration is supplied via a JSON file path or directly as a
dictionary.  Missing keys are filled with defaults; see ``__init__``.
"""

from __future__ import annotations

import json
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Optional, Tuple

from tiptap_migration.auditors.image_checker import check_images, write_report
from tiptap_migration.auditors.tag_inventory import count_tags, unhandled_tags, write_counts
from tiptap_migration.extractors.wordpress_extractor import extract_from_wxr, load_items, write_extraction
from tiptap_migration.models import ConvertedItem, ImageRef, LegacyPage, LegacyPost
from tiptap_migration.parsers import PAGE_BLOCKS, POST_BLOCKS, UrlRewriteTable, convert_content, load_url_table
from tiptap_migration.parsers.urls import DEFAULT_ASSET_BASE_URL
from tiptap_migration.utils.errors import report_error, report_ok
from tiptap_migration.utils.redirects import generate_redirects_csv, write_redirects_file

KINDS: Dict[str, Tuple[Any, frozenset]] = {
    "posts": (LegacyPost, POST_BLOCKS),
    "pages": (LegacyPage, PAGE_BLOCKS),
}

EMPTY_BLOCK = {"type": "paragraph", "content": []}

LOG_FILE = os.path.join("reports", "migration", "migration.log")
PROGRESS_EVERY = 50


class MigrationTool:
    """
    Encapsulates all state and behavior required to convert the legacy
    WordPress content.  Detailed success and failure information is
    recorded using the :mod:`tiptap_migration.utils.errors` module.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, *, config_file: Optional[str] = None) -> None:
        if config_file and os.path.exists(config_file):
            with open(config_file, "r", encoding="utf-8") as f:
                config = json.load(f)
        elif config is None:
            config = {}

        # Ensure essential keys exist to prevent KeyErrors
        config.setdefault("paths", {})
        default_dir = os.path.join("scripts", "migration", "output")
        config["paths"].setdefault("input_dir", os.getenv("MIGRATION_INPUT_DIR", default_dir))
        config["paths"].setdefault("output_dir", config["paths"]["input_dir"])
        config["paths"].setdefault("url_map", "media-url-map.json")
        config["paths"].setdefault("wxr_export", "")
        config["paths"].setdefault("redirects_file", os.path.join("reports", "_redirects"))

        config.setdefault("migration", {})
        config["migration"].setdefault("dry_run", False)
        config["migration"].setdefault("limit", None)
        config["migration"].setdefault("workers", 4)
        config["migration"].setdefault("verbose", False)
        config["migration"].setdefault(
            "asset_base_url", os.getenv("MIGRATION_ASSET_BASE_URL", DEFAULT_ASSET_BASE_URL)
        )

        config.setdefault("audit", {})
        config["audit"].setdefault("rpm", 600)
        config["audit"].setdefault("timeout", 10)

        self.config = config

    def log_message(self, message: str, level: str = "INFO") -> None:
        print(f"[{level}] {message}")
        os.makedirs(os.path.dirname(LOG_FILE), exist_ok=True)
        with open(LOG_FILE, "a", encoding="utf-8") as f:
            f.write(f"{level}: {message}\n")

    def _path(self, name: str) -> str:
        return os.path.join(self.config["paths"]["input_dir"], name)

    def _out_path(self, name: str) -> str:
        return os.path.join(self.config["paths"]["output_dir"], name)

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def extract_export(self, wxr_path: Optional[str] = None) -> Dict[str, Any]:
        """Parse the WXR export and write the JSON inputs for conversion."""
        path = wxr_path or self.config["paths"]["wxr_export"]
        self.log_message(f"Reading WordPress export from {path}")
        result = extract_from_wxr(path)
        self.log_message(
            f"Found {len(result['posts'])} posts, {len(result['pages'])} pages, "
            f"{len(result['attachments'])} attachments"
        )
        if not self.config["migration"]["dry_run"]:
            for written in write_extraction(result, self.config["paths"]["output_dir"]):
                self.log_message(f"Wrote {written}", level="DEBUG")
        return result

    def load_url_table(self) -> UrlRewriteTable:
        """Load the media URL map; a missing map yields an empty table."""
        path = self._path(self.config["paths"]["url_map"])
        base = self.config["migration"]["asset_base_url"]
        try:
            table = load_url_table(path, asset_base_url=base)
        except FileNotFoundError:
            self.log_message(f"Could not load {path}, URLs will not be replaced", level="WARNING")
            report_error("URL_MAP_MISSING", {"slug": path})
            return UrlRewriteTable({}, asset_base_url=base)
        self.log_message(f"Loaded {len(table)} URL mappings")
        return table

    def load_items(self, kind: str) -> List[Any]:
        model, _ = KINDS[kind]
        path = self._path(f"{kind}.json")
        items = load_items(path, model)
        self.log_message(f"Loaded {len(items)} {kind} from {path}")
        limit = self.config["migration"]["limit"]
        if limit is not None:
            items = items[: int(limit)]
        return items

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    @staticmethod
    def convert_item(item: Any, kind: str, table: UrlRewriteTable) -> ConvertedItem:
        _, blocks = KINDS[kind]
        document, images = convert_content(item.content, table, blocks=blocks)
        return ConvertedItem(
            kind=kind,
            slug=item.slug or str(item.id),
            title=item.title,
            content=document,
            images=[ImageRef(**img) for img in images],
            source_length=len(item.content or ""),
        )

    def convert_items(
        self, items: List[Any], kind: str, table: UrlRewriteTable
    ) -> Tuple[List[ConvertedItem], Dict[str, int]]:
        """
        Convert ``items`` on a thread pool.  Results keep the input order.
        A failing item is reported and counted, never aborts the batch.
        """
        stats = {"total": len(items), "converted": 0, "errors": 0, "warnings": 0}
        results: List[Optional[ConvertedItem]] = [None] * len(items)
        verbose = self.config["migration"]["verbose"]
        workers = max(1, int(self.config["migration"]["workers"] or 1))

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(self.convert_item, item, kind, table): index
                for index, item in enumerate(items)
            }
            done = 0
            for future in as_completed(futures):
                index = futures[future]
                item = items[index]
                ref = {"slug": item.slug, "title": item.title}
                done += 1
                try:
                    converted = future.result()
                except Exception as e:
                    stats["errors"] += 1
                    self.log_message(f"{item.slug}: {e}", level="ERROR")
                    report_error("CONVERSION_FAILED", ref, e)
                    continue

                results[index] = converted
                stats["converted"] += 1
                if "<img" in (item.content or "").lower() and not converted.images:
                    stats["warnings"] += 1
                    self.log_message(f"No images extracted from {item.slug}", level="WARNING")
                    report_error("NO_IMAGES", ref)
                if (item.content or "").strip() and converted.content["content"] == [EMPTY_BLOCK]:
                    stats["warnings"] += 1
                    self.log_message(f"Nothing left after converting {item.slug}", level="WARNING")
                    report_error("EMPTY_CONTENT", ref)
                if verbose:
                    self.log_message(
                        f"  Processed: {item.title[:50]}... images: {len(converted.images)}",
                        level="DEBUG",
                    )
                report_ok("CONVERTED", ref, {"kind": kind, "images": len(converted.images)})
                if done % PROGRESS_EVERY == 0:
                    self.log_message(f"  Progress: {done}/{len(items)}")

        return [r for r in results if r is not None], stats

    def migrate(self, kind: str, table: Optional[UrlRewriteTable] = None) -> Dict[str, Any]:
        """Run one call site (``"posts"`` or ``"pages"``) end to end."""
        if kind not in KINDS:
            raise ValueError(f"Unknown content kind: {kind!r}")
        dry_run = self.config["migration"]["dry_run"]
        self.log_message(f"=== Converting {kind} ===")
        if dry_run:
            self.log_message("[DRY RUN MODE - No files will be written]")

        items = self.load_items(kind)
        table = table if table is not None else self.load_url_table()
        converted, stats = self.convert_items(items, kind, table)

        if converted:
            lengths_before = [c.source_length for c in converted]
            lengths_after = [len(c.content_json) for c in converted]
            stats["avg_length_before"] = round(sum(lengths_before) / len(converted))
            stats["avg_length_after"] = round(sum(lengths_after) / len(converted))

        if not dry_run:
            out = self._out_path(f"{kind}-tiptap.json")
            os.makedirs(os.path.dirname(out) or ".", exist_ok=True)
            with open(out, "w", encoding="utf-8") as f:
                json.dump([c.to_record() for c in converted], f, ensure_ascii=False, indent=2)
            self.log_message(f"Converted {kind} written to {out}")
            self.write_sample(items, kind, table)

        self.log_message(f"=== Summary ({kind}) ===")
        self.log_message(f"Total in JSON: {stats['total']}")
        self.log_message(f"Converted: {stats['converted']}")
        self.log_message(f"Errors: {stats['errors']}")
        self.log_message(f"Warnings: {stats['warnings']}")
        if kind == "pages" and converted:
            self.log_message(f"Average content length before: {stats['avg_length_before']} chars")
            self.log_message(f"Average content length after: {stats['avg_length_after']} chars")
        stats["items"] = converted
        return stats

    def write_sample(self, items: List[Any], kind: str, table: UrlRewriteTable) -> Optional[str]:
        """Save one item (preferably with an image) and its conversion."""
        if not items:
            return None
        sample = next((i for i in items if "<img" in (i.content or "")), items[0])
        converted = self.convert_item(sample, kind, table)
        path = self._out_path("sample-tiptap-output.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"original": sample.content, "converted": converted.content}, f, ensure_ascii=False, indent=2)
        self.log_message(f"Sample output saved to: {path}")
        return path

    # ------------------------------------------------------------------
    # Audits and redirects
    # ------------------------------------------------------------------

    def audit_images(self, converted: List[ConvertedItem]) -> List[Dict[str, object]]:
        """HEAD-check every image in the converted items and write a report."""
        entries = [(c.slug, img.url) for c in converted for img in c.images]
        self.log_message(f"Checking {len(entries)} image references")
        results = check_images(
            entries,
            rpm=int(self.config["audit"]["rpm"]),
            timeout=float(self.config["audit"]["timeout"]),
        )
        for r in results:
            if r["status"] == "broken":
                report_error("IMAGE_BROKEN", {"slug": r["source"], "title": r["url"]})
            elif r["status"] == "unreachable":
                report_error("IMAGE_UNREACHABLE", {"slug": r["source"], "title": r["url"]})
        out = write_report(results, os.path.join("reports", "image-validation.json"))
        self.log_message(f"Image report written to {out}")
        return results

    def tag_inventory(self, kinds: List[str]) -> Dict[str, int]:
        """Count legacy HTML tags and log the ones the converter ignores."""
        htmls: List[str] = []
        for kind in kinds:
            htmls.extend(item.content for item in self.load_items(kind))
        counter = count_tags(htmls)
        write_counts(counter, os.path.join("reports", "html_tags_counts.csv"))
        unhandled = unhandled_tags(counter)
        for name, n in unhandled.items():
            self.log_message(f"Unhandled tag <{name}>: {n}", level="WARNING")
        return unhandled

    def generate_redirects(self, new_base: str = "") -> int:
        """Write ``_redirects`` and the CSV map from ``url-map.json``."""
        path = self._path("url-map.json")
        with open(path, "r", encoding="utf-8") as f:
            url_map = json.load(f)
        count = write_redirects_file(url_map, self.config["paths"]["redirects_file"])
        generate_redirects_csv(url_map, new_base=new_base)
        self.log_message(f"Written {count} redirects to {self.config['paths']['redirects_file']}")
        return count
