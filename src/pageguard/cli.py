"""
Command-line interface for pageguard.

Runs a single guarded step against a URL, which is handy for checking a
locator before putting it in a test.
"""

import argparse
import sys

PROBE_ACTIONS = ["present", "displayed", "enabled", "click", "hover"]


def run_probe(actions, locator, action: str, timeout: float) -> int:
    """Run one guarded step and return its failure count."""
    if action == "present":
        return actions.wait_for_element_present(locator, timeout).failures
    if action == "displayed":
        return actions.wait_for_element_displayed(locator, timeout).failures
    if action == "enabled":
        return actions.wait_for_element_enabled(locator, timeout).failures
    if action == "click":
        return actions.click(locator)
    if action == "hover":
        return actions.hover(locator)
    raise ValueError(f"Unknown probe action: {action}")


def probe_command(args):
    """Load a URL and run one guarded step on a locator."""
    from playwright.sync_api import sync_playwright

    from .actions import GuardedActions
    from .config import EngineConfig
    from .drivers.playwright import PlaywrightSession
    from .errors import ConfigurationError
    from .locators import Locator
    from .outcome import OutcomeLog

    try:
        locator = Locator.of(args.by, args.locator)
        config = EngineConfig.from_env()
        if args.timeout is not None:
            config = EngineConfig(
                timeout=args.timeout, poll_interval=config.poll_interval, echo=config.echo
            )
    except ConfigurationError as e:
        print(f"❌ Error: {e}")
        sys.exit(2)

    print("🔍 pageguard probe")
    print(f"Target: {args.url}")
    print(f"Locator: {locator}")
    print(f"Action: {args.action}")
    print(f"Timeout: {config.timeout}s")
    print()

    log = OutcomeLog(echo=True)
    with sync_playwright() as p:
        browser = p.chromium.launch(headless=args.headless)
        page = browser.new_page()
        actions = GuardedActions(PlaywrightSession(page), recorder=log, config=config)

        failures = actions.goto_url(args.url)
        if not failures:
            failures += run_probe(actions, locator, args.action, config.timeout)

        browser.close()

    summary = log.summary()
    print()
    print(f"📊 {summary['passes']} passed, {summary['failures']} failed")
    sys.exit(1 if failures else 0)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the pageguard command."""
    parser = argparse.ArgumentParser(
        description="pageguard - guarded browser actions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Wait for an element to show up
  pageguard probe http://localhost:8888 --by id --locator login

  # Click a button, waiting up to 10 seconds for it to be ready
  pageguard probe http://localhost:8888 \\
      --by xpath --locator "//button[@type='submit']" \\
      --action click --timeout 10

Environment:
  PAGEGUARD_TIMEOUT, PAGEGUARD_POLL_INTERVAL, PAGEGUARD_ECHO
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    probe_parser = subparsers.add_parser(
        "probe", help="Run one guarded step against an element on a page"
    )
    probe_parser.add_argument("url", help="URL to load (e.g., http://localhost:8888)")
    probe_parser.add_argument(
        "--by",
        default="id",
        help="Locator kind: xpath, id, name, classname, linktext, partiallinktext, tagname "
        "(default: id)",
    )
    probe_parser.add_argument("--locator", required=True, help="Locator value")
    probe_parser.add_argument(
        "--action",
        choices=PROBE_ACTIONS,
        default="present",
        help="Step to run (default: present)",
    )
    probe_parser.add_argument(
        "--timeout", type=float, default=None, help="Wait in seconds (default: 5)"
    )
    probe_parser.add_argument(
        "--headed",
        action="store_false",
        dest="headless",
        help="Show the browser window (default: headless)",
    )
    probe_parser.set_defaults(func=probe_command)

    return parser


def main():
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
