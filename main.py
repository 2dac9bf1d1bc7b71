# main.py
import argparse
import json
import logging

from api.api import analyze_url
from config import get_settings
from history import ScanHistory, format_summary


def print_json(obj):
    print(json.dumps(obj, indent=2, ensure_ascii=False))


def handle_command(command, history):
    """Run a ':' command against the history. Returns False for unknown commands."""
    if command == ":history":
        if not len(history):
            print("No history yet - analyze a URL to store it here.")
        for entry in history.entries:
            print(f"{entry.timestamp}  {format_summary(entry)}")
        return True
    if command == ":clear":
        history.clear()
        history.save()
        print("History cleared.")
        return True
    return False


def main_loop(history, settings):
    print("Phishing Risk Checker - lexical analysis\n")
    print("Commands: :history, :clear. Press Enter on an empty line to exit.\n")
    while True:
        try:
            url = input("Enter URL to analyze: ").strip()
            if url == "":
                break
            if url.startswith(":"):
                if not handle_command(url, history):
                    print(f"Unknown command: {url}")
                continue
            result = analyze_url(url, settings)
            print_json(result)
            history.record(url, result)
            history.save()
        except (KeyboardInterrupt, EOFError):
            break


def build_parser():
    parser = argparse.ArgumentParser(description="Interactively score URLs for phishing risk.")
    parser.add_argument("--history-file", help="Where to keep scan history (JSON)")
    parser.add_argument("--no-history", action="store_true", help="Keep history in memory only")
    return parser


def main():
    args = build_parser().parse_args()
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    if args.no_history:
        history = ScanHistory(limit=settings.history_limit)
    else:
        history = ScanHistory.load(args.history_file or settings.history_file, limit=settings.history_limit)
    main_loop(history, settings)


if __name__ == "__main__":
    main()
