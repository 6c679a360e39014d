import json
import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from heritage_map.errors import StateError
from heritage_map.presentation import PanelConfig, ensure_panels, page_context
from heritage_map.repository import DEFAULT_TIMEOUT
from heritage_map.state import AppState

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


def build_static_site(
    data_source: str | Path,
    site_dir: Path,
    show_country_panel: bool = True,
    timeout_seconds: float = DEFAULT_TIMEOUT,
    templates_dir: Path = TEMPLATES_DIR,
) -> AppState:
    heritage = AppState(data_source, show_country_panel=show_country_panel, timeout_seconds=timeout_seconds)
    if not heritage.load():
        if heritage.error is None:
            raise StateError(f"Loading {data_source} failed without an error")
        raise heritage.error

    panels = PanelConfig(show_country_panel=show_country_panel)
    html_output = render_index(heritage, panels, templates_dir)
    ensure_panels(html_output, panels)

    site_dir.mkdir(parents=True, exist_ok=True)
    assets_dir = site_dir / "assets"
    assets_dir.mkdir(parents=True, exist_ok=True)
    data_dir = site_dir / "data"
    data_dir.mkdir(parents=True, exist_ok=True)

    (assets_dir / "style.css").write_text((templates_dir / "style.css").read_text(encoding="utf-8"), encoding="utf-8")
    (data_dir / "unesco-sites.json").write_text(_feature_collection_json(heritage), encoding="utf-8")
    (site_dir / "index.html").write_text(html_output, encoding="utf-8")
    logger.info(f"Wrote static site for {len(heritage.sites)} sites to {site_dir}")
    return heritage


def render_index(heritage: AppState, panels: PanelConfig, templates_dir: Path = TEMPLATES_DIR) -> str:
    env = Environment(loader=FileSystemLoader(str(templates_dir)), autoescape=True)
    return env.get_template("index.html").render(page_context(heritage, panels, static_mode=True))


def _feature_collection_json(heritage: AppState) -> str:
    payload = {"type": "FeatureCollection", "features": [site.to_feature() for site in heritage.sites]}
    return json.dumps(payload, indent=2, ensure_ascii=False)
