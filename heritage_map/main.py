from argparse import ArgumentParser
import logging
from pathlib import Path
import sys

if __package__ in (None, ""):
    sys.path.append(str(Path(__file__).resolve().parent.parent))

from heritage_map.config import BASE_DIR, Settings, load_env_file
from heritage_map.errors import InvalidSelectionError, LoadError, MissingPanelError
from heritage_map.filters import FilterSelection, type_options
from heritage_map.presentation import country_statistics_text, summary_text
from heritage_map.site_builder import build_static_site
from heritage_map.state import AppState

logger = logging.getLogger("heritage_map")


def build_site(settings: Settings) -> int:
    try:
        heritage = build_static_site(
            settings.data_source,
            settings.site_dir,
            show_country_panel=settings.show_country_panel,
            timeout_seconds=settings.fetch_timeout_seconds,
        )
    except (LoadError, MissingPanelError) as exc:
        logger.error(f"Site build failed: {exc}")
        return 1
    print(f"Site built at {settings.site_dir / 'index.html'} with {len(heritage.sites)} sites")
    return 0


def serve(settings: Settings, host: str, port: int) -> int:
    import uvicorn

    from heritage_map.web_app import create_app

    app = create_app(
        data_source=settings.data_source,
        show_country_panel=settings.show_country_panel,
        timeout_seconds=settings.fetch_timeout_seconds,
    )
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())
    return 0


def show_stats(settings: Settings, country: str | None) -> int:
    heritage = _load(settings)
    if heritage is None:
        return 1
    statistics = heritage.statistics
    if country:
        if country not in statistics.by_country:
            logger.error(f"No sites recorded for country {country!r}")
            return 1
        print(country_statistics_text(country, statistics.for_country(country)))
        return 0

    print(summary_text(statistics.overall))
    for name, breakdown in statistics.by_country.items():
        print(f"{name}: {breakdown.total} (C {breakdown.cultural} / N {breakdown.natural} / M {breakdown.mixed})")
    return 0


def show_filtered(settings: Settings, selection: FilterSelection) -> int:
    heritage = _load(settings)
    if heritage is None:
        return 1
    visible = heritage.apply_filter(selection)
    for site in visible:
        year = f", inscribed {site.inscribed_year}" if site.inscribed_year is not None else ""
        print(f"{site.name} [{site.site_type}] - {site.country}{year}")
    print(f"{len(visible)} of {len(heritage.sites)} sites match {selection.to_dict()}")
    return 0


def _load(settings: Settings) -> AppState | None:
    heritage = AppState(
        settings.data_source,
        show_country_panel=settings.show_country_panel,
        timeout_seconds=settings.fetch_timeout_seconds,
    )
    if not heritage.load():
        return None
    return heritage


def main(argv: list[str] | None = None) -> int:
    load_env_file(BASE_DIR)
    settings = Settings.from_env()

    parser = ArgumentParser(description="UNESCO World Heritage map utility CLI")
    parser.add_argument(
        "--data",
        default=None,
        help="Path or http(s) URL of the sites GeoJSON (default: HERITAGE_MAP_DATA_SOURCE or data/unesco-sites.json)",
    )
    parser.add_argument(
        "--no-country-panel",
        action="store_true",
        help="Do not show per-country statistics when a site is selected",
    )
    sub = parser.add_subparsers(dest="command", required=True)
    build = sub.add_parser("build-site", help="Build the static map site")
    build.add_argument("--site-dir", type=Path, default=None, help="Output directory (default: site/)")
    run = sub.add_parser("serve", help="Serve the interactive map preview")
    run.add_argument("--host", default="127.0.0.1")
    run.add_argument("--port", type=int, default=8000)
    stats = sub.add_parser("stats", help="Print global or per-country statistics")
    stats.add_argument("--country", default=None, help="Restrict output to one country")
    filtering = sub.add_parser("filter", help="List sites matching a type and country")
    filtering.add_argument("--type", dest="site_type", default="all", help=f"One of: {', '.join(type_options())}")
    filtering.add_argument("--country", default="all", help="Country name or 'all'")
    args = parser.parse_args(argv)

    if args.data:
        settings.data_source = args.data
    if args.no_country_panel:
        settings.show_country_panel = False

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    if args.command == "build-site":
        if args.site_dir is not None:
            settings.site_dir = args.site_dir
        return build_site(settings)
    if args.command == "serve":
        return serve(settings, args.host, args.port)
    if args.command == "stats":
        return show_stats(settings, args.country)
    if args.command == "filter":
        try:
            selection = FilterSelection.from_values(args.site_type, args.country)
        except InvalidSelectionError as exc:
            parser.error(str(exc))
        return show_filtered(settings, selection)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
