import argparse
import logging
import sys
from pathlib import Path

from site_redirects.api.deps import get_settings
from site_redirects.app_shell.config import build_resolver
from site_redirects.components.redirects import (
    GONE_STATUS,
    Gone,
    RedirectResolver,
    ResolveRedirectInput,
    run_resolve,
)
from site_redirects.rules.loader import load_rules

logger = logging.getLogger("cli")


def get_resolver(rules_path: Path) -> RedirectResolver:
    try:
        return build_resolver(load_rules(rules_path))
    except FileNotFoundError:
        logger.error("Rules file %s not found.", rules_path)
        sys.exit(1)
    except ValueError as e:
        logger.error("%s", e)
        sys.exit(1)


def handle_check(rules_path: Path, args: argparse.Namespace) -> None:
    resolver = get_resolver(rules_path)
    print(f"Rules OK: {rules_path}")
    print(
        f"{len(resolver.exact_rules)} exact, {len(resolver.gone_rules)} gone, "
        f"{len(resolver.pattern_rules)} pattern rules; status {int(resolver.permanent_code)}"
    )


def handle_resolve(rules_path: Path, args: argparse.Namespace) -> None:
    resolver = get_resolver(rules_path)
    url = args.url
    if url.startswith("/"):
        url = f"http://localhost{url}"

    output = run_resolve(ResolveRedirectInput(url=url), resolver=resolver)
    if isinstance(output.result, Gone):
        print(f"{GONE_STATUS} Gone")
    else:
        print(f"{int(output.result.code)} {output.result.target}")
    print(f"stage: {output.stage.value}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Site migration redirects CLI")
    parser.add_argument("--rules", help="Path to the rules file (default: $SITE_REDIRECTS_RULES)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log resolver decisions")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # check
    subparsers.add_parser("check", help="Validate the rules file")

    # resolve
    resolve_parser = subparsers.add_parser("resolve", help="Show the decision for a URL")
    resolve_parser.add_argument("url", help="Absolute URL or path (e.g. /old/page?x=1)")

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    rules_path = Path(args.rules) if args.rules else get_settings().rules_path

    if args.command == "check":
        handle_check(rules_path, args)
    elif args.command == "resolve":
        handle_resolve(rules_path, args)


if __name__ == "__main__":
    main()
