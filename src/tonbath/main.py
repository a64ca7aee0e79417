# Copyright (c) 2024 Disintar LLP Licensed under the Apache License Version 2.0
import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from loguru import logger
from tqdm import tqdm

from tonbath.address_book import StaticAddressBook
from tonbath.config import Config
from tonbath.errors import TraceFormatError
from tonbath.summarizer import find_actions
from tonbath.toncenter_models import address_book_from_response, parse_traces_response
from tonbath.utils import format_ton


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="tonbath", description="Summarize TON traces into high level actions")
    p.add_argument("traces", nargs="+", metavar="TRACE.json", help="toncenter v3 trace or /traces response")
    p.add_argument("--account", help="only keep actions involving this account and report its extra")
    p.add_argument("--disable-straw", action="append", default=[], metavar="NAME",
                   help="skip a straw by name, may be repeated")
    p.add_argument("--address-book", metavar="FILE", help="JSON address book with account names")
    p.add_argument("--output", metavar="FILE", help="write JSON here instead of stdout")
    p.add_argument("-v", "--verbose", action="count", default=0, help="raise log level, may be repeated")
    return p


def apply_args(cfg: Config, args: argparse.Namespace) -> Config:
    """Command line options take precedence over the environment."""
    if args.verbose:
        cfg.loglevel += args.verbose
    if args.account:
        cfg.set_for_account(args.account)
    if args.disable_straw:
        cfg.disabled_straws = list(cfg.disabled_straws) + list(args.disable_straw)
    if args.address_book:
        cfg.load_address_book(args.address_book)
    if args.output:
        cfg.output_path = args.output
    return cfg


def summarize_file(path: str, cfg: Config, book: StaticAddressBook) -> List[Dict[str, Any]]:
    try:
        with open(path, "r") as f:
            doc = json.load(f)
    except ValueError as e:
        raise TraceFormatError(f"{path}: not a JSON document: {e}") from e

    file_book = StaticAddressBook()
    file_book.update(address_book_from_response(doc))
    # Names from the configured book win over indexer domains
    file_book.update(book)

    results = []
    for trace in parse_traces_response(doc):
        summary = find_actions(trace, for_account=cfg.for_account, book=file_book, straws=cfg.straws())
        entry: Dict[str, Any] = {"file": path, "trace": trace.hash, **summary.to_dict()}
        if cfg.for_account is not None:
            extra = summary.extra(cfg.for_account)
            entry["extra"] = extra
            logger.info(f"{path}: {len(summary.actions)} actions, extra for "
                        f"{cfg.for_account.short()}: {format_ton(extra)}")
        else:
            logger.info(f"{path}: {len(summary.actions)} actions")
        for action in summary.actions:
            logger.debug(f"  {action}")
        results.append(entry)
    return results


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = apply_args(Config.from_env(), args)
        straws = cfg.straws()
    except ValueError as e:
        logger.error(str(e))
        return 2

    logger.remove()
    logger.add(sys.stderr, level=cfg.log_level_name())
    logger.debug(f"Enabled straws: {', '.join(s.name for s in straws)}")

    book = cfg.address_book()
    results: List[Dict[str, Any]] = []
    files = args.traces
    for path in tqdm(files, desc="Summarizing traces", unit="file", disable=len(files) < 2):
        try:
            results.extend(summarize_file(path, cfg, book))
        except TraceFormatError as e:
            logger.error(f"Bad trace {path}: {e}")
            return 1
        except OSError as e:
            logger.error(f"Can't read {path}: {e}")
            return 1

    out = json.dumps(results, indent=cfg.indent)
    if cfg.output_path:
        with open(cfg.output_path, "w") as f:
            f.write(out)
            f.write("\n")
    else:
        print(out)
    return 0


if __name__ == '__main__':
    sys.exit(main())
