import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

import httpx

from imagecharts.app_shell.config import chart_from_rules, resolve_rules
from imagecharts.components.chart import ImageChart, ImageChartError

logger = logging.getLogger("cli")

# Six-bar gradient chart printed by `imagecharts sample`
SAMPLE_PARAMETERS = (
    ("chbr", "10"),
    ("chd", "t:10,40,60,80,30,20"),
    ("chf", "b0,lg,0,fdb45c,0,ed7e30,1"),
    ("chs", "700x125"),
    ("cht", "bvs"),
    ("chxt", "y,x"),
)


def parse_param(raw: str) -> tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got '{raw}'")
    return key.strip(), value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imagecharts", description="Render charts with Image-Charts"
    )
    parser.add_argument("--config", type=Path, help="Path to a client rules YAML file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    params = argparse.ArgumentParser(add_help=False)
    params.add_argument(
        "-p",
        "--param",
        dest="params",
        action="append",
        default=[],
        type=parse_param,
        metavar="KEY=VALUE",
        help="Chart parameter, e.g. cht=bvs (repeatable)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("url", parents=[params], help="Print the chart url")
    render_parser = subparsers.add_parser(
        "render", parents=[params], help="Render the chart to a file"
    )
    render_parser.add_argument("output", type=Path, help="Output image path")
    subparsers.add_parser("datauri", parents=[params], help="Print a base64 data URI")
    subparsers.add_parser("sample", help="Print the url of a sample bar chart")
    return parser


def build_chart(
    args: argparse.Namespace, transport: httpx.AsyncBaseTransport | None = None
) -> ImageChart:
    rules = resolve_rules(args.config)
    chart = chart_from_rules(rules, transport=transport)
    params = SAMPLE_PARAMETERS if args.command == "sample" else args.params
    for key, value in params:
        chart.set(key, value)
    return chart


def handle_render(chart: ImageChart, output: Path) -> None:
    asyncio.run(chart.to_file(output))
    print(f"Chart written to {output}")


def main(
    argv: Sequence[str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        chart = build_chart(args, transport)

        if args.command in ("url", "sample"):
            print(chart.to_url())
        elif args.command == "render":
            handle_render(chart, args.output)
        elif args.command == "datauri":
            print(asyncio.run(chart.to_data_uri()))
    # OSError covers a missing rules file as well as failed writes
    except (ImageChartError, ValueError, OSError) as e:
        logger.error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
