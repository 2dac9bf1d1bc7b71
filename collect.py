"""Batch collection utility for the phishing risk engine."""

from __future__ import annotations

import argparse
import csv
import json
import logging
import sys
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from bs4 import BeautifulSoup
from joblib import Parallel, delayed

from api.api import analyze_url
from config import Settings, get_settings

logger = logging.getLogger(__name__)


INPUT_SUFFIXES = {
    ".txt": "txt",
    ".list": "txt",
    ".jsonl": "jsonl",
    ".html": "html",
    ".htm": "html",
    ".eml": "html",
}


def _normalize_input_format(path: Path, explicit: Optional[str]) -> str:
    if explicit:
        return explicit.lower()
    return INPUT_SUFFIXES.get(path.suffix.lower(), "csv")


def _normalize_output_format(path: Path, explicit: Optional[str]) -> str:
    if explicit:
        return explicit.lower()
    return "csv" if path.suffix.lower() == ".csv" else "jsonl"


def _entry(url, label=None) -> Optional[Dict]:
    """Build an input entry; blank URLs give None, blank labels are dropped."""
    url = str(url or "").strip()
    if not url:
        return None
    entry = {"url": url}
    if label is not None and str(label).strip():
        entry["label"] = label
    return entry


def _content_lines(handle) -> Iterator[Tuple[int, str]]:
    for lineno, line in enumerate(handle, start=1):
        line = line.strip()
        if line and not line.startswith("#"):
            yield lineno, line


def _read_txt(path: Path) -> Iterator[Dict]:
    with path.open("r", encoding="utf-8") as handle:
        for _, line in _content_lines(handle):
            yield _entry(line)


def _read_csv(path: Path) -> Iterator[Dict]:
    with path.open("r", encoding="utf-8", newline="") as handle:
        for row in csv.DictReader(handle):
            entry = _entry(row.get("url") or row.get("URL"), row.get("label"))
            if entry:
                yield entry


def _read_jsonl(path: Path) -> Iterator[Dict]:
    """Lines hold either a bare JSON string or an object with url/label keys."""
    with path.open("r", encoding="utf-8") as handle:
        for lineno, line in _content_lines(handle):
            try:
                data = json.loads(line)
            except json.JSONDecodeError:
                logger.debug("Skipping undecodable line %d in %s", lineno, path)
                continue
            if isinstance(data, str):
                data = {"url": data}
            entry = _entry(data.get("url"), data.get("label")) if isinstance(data, dict) else None
            if entry:
                yield entry


def _read_html(path: Path) -> Iterator[Dict]:
    """Yield absolute http(s) link targets from a saved page or email body."""
    with path.open("r", encoding="utf-8", errors="replace") as handle:
        soup = BeautifulSoup(handle.read(), "html.parser")

    links = (a.get("href", "").strip() for a in soup.find_all("a", href=True))
    for href in dict.fromkeys(links):
        if href.lower().startswith(("http://", "https://")):
            yield _entry(href)


READERS = {
    "txt": _read_txt,
    "csv": _read_csv,
    "jsonl": _read_jsonl,
    "html": _read_html,
}


def _iter_inputs(path: Path, input_format: str) -> Iterator[Dict]:
    return READERS.get(input_format, _read_csv)(path)


def _summarize_result(result: Dict, label: Optional[str]) -> Dict:
    return {
        "url": result.get("url"),
        "label": label,
        "score": result.get("score"),
        "severity": result.get("severity"),
        "reasons": result.get("reasons"),
        "warn": result.get("warn"),
        "features": result.get("features", {}),
    }


def _write_jsonl(rows: Iterable[Dict], path: Path) -> None:
    with path.open("w", encoding="utf-8") as handle:
        for row in rows:
            handle.write(json.dumps(row, ensure_ascii=False))
            handle.write("\n")


def _write_csv(rows: Iterable[Dict], path: Path) -> None:
    rows = list(rows)
    if not rows:
        return
    fieldnames = list(rows[0].keys())
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=fieldnames)
        writer.writeheader()
        for row in rows:
            row = dict(row)
            for key in ("features", "reasons"):
                if key in row:
                    row[key] = json.dumps(row[key], ensure_ascii=False)
            writer.writerow(row)


def analyze_entries(entries: List[Dict], jobs: int = 1, settings: Optional[Settings] = None) -> List[Dict]:
    """Analyze entries, fanning out over joblib workers; output keeps input order."""
    settings = settings or get_settings()
    results = Parallel(n_jobs=jobs)(
        delayed(analyze_url)(entry["url"], settings) for entry in entries
    )
    return [_summarize_result(result, entry.get("label")) for entry, result in zip(entries, results)]


def run_collect(input_path: Path, output_path: Path, input_format: str, output_format: str,
                jobs: int = 1) -> int:
    entries = [entry for entry in _iter_inputs(input_path, input_format) if entry.get("url")]
    outputs = analyze_entries(entries, jobs=jobs)
    logger.info("Analyzed %d URLs from %s", len(outputs), input_path)

    if output_format == "csv":
        _write_csv(outputs, output_path)
    else:
        _write_jsonl(outputs, output_path)
    return len(outputs)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Collect phishing risk verdicts for a list of URLs.")
    parser.add_argument("input", help="Path to input list (.txt, .csv, .jsonl, .html)")
    parser.add_argument("output", help="Path to output file (.jsonl or .csv)")
    parser.add_argument(
        "--input-format",
        choices=["txt", "csv", "jsonl", "html"],
        help="Override input format detection",
    )
    parser.add_argument(
        "--output-format",
        choices=["jsonl", "csv"],
        help="Override output format detection",
    )
    parser.add_argument(
        "--jobs",
        type=int,
        help="Parallel workers (joblib n_jobs, -1 for all cores)",
    )
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    input_path = Path(args.input)
    output_path = Path(args.output)

    if not input_path.exists():
        print(f"Input file not found: {input_path}", file=sys.stderr)
        sys.exit(1)

    input_format = _normalize_input_format(input_path, args.input_format)
    output_format = _normalize_output_format(output_path, args.output_format)
    jobs = args.jobs if args.jobs is not None else settings.collect_jobs

    run_collect(input_path, output_path, input_format, output_format, jobs=jobs)


if __name__ == "__main__":
    main()
