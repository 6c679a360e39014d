from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from pathlib import Path

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from heritage_map.config import BASE_DIR, Settings, load_env_file
from heritage_map.errors import InvalidSelectionError, MissingPanelError, StateError
from heritage_map.filters import FilterSelection
from heritage_map.presentation import (
    PanelConfig,
    build_markers,
    country_statistics_text,
    ensure_panels,
    page_context,
    site_details,
)
from heritage_map.site_types import ALL
from heritage_map.state import AppState

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


def create_app(
    data_source: str | Path,
    show_country_panel: bool = True,
    timeout_seconds: float = 30.0,
    templates_dir: Path = TEMPLATES_DIR,
) -> FastAPI:
    templates = Jinja2Templates(directory=str(templates_dir))
    panels = PanelConfig(show_country_panel=show_country_panel)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        heritage: AppState = app.state.heritage
        try:
            ensure_panels(_render_page(templates, heritage, panels), panels)
        except MissingPanelError as exc:
            app.state.panel_error = exc
            logger.error(f"Site load aborted: {exc}")
            yield
            return
        await run_in_threadpool(heritage.load)
        yield

    app = FastAPI(title="World Heritage Map Preview", lifespan=lifespan)
    app.state.heritage = AppState(
        data_source,
        show_country_panel=show_country_panel,
        timeout_seconds=timeout_seconds,
    )
    app.state.panel_error = None

    def loaded_state() -> AppState:
        heritage: AppState = app.state.heritage
        try:
            heritage.require_loaded()
        except StateError as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc
        return heritage

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "state": app.state.heritage.status.value}

    @app.get("/", response_class=HTMLResponse)
    def home(request: Request):
        if app.state.panel_error is not None:
            raise HTTPException(status_code=500, detail=str(app.state.panel_error))
        page = _render_page(templates, app.state.heritage, panels, request=request)
        return HTMLResponse(page)

    @app.get("/api/sites")
    def sites(site_type: str = Query(ALL, alias="type"), country: str = ALL) -> dict[str, object]:
        heritage = loaded_state()
        try:
            selection = FilterSelection.from_values(site_type, country)
        except InvalidSelectionError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        visible = heritage.apply_filter_indexed(selection)
        if selection.country == ALL:
            label, breakdown = "All countries", heritage.statistics.overall
        else:
            label, breakdown = selection.country, heritage.statistics.for_country(selection.country)
        return {
            "selection": selection.to_dict(),
            "count": len(visible),
            "markers": build_markers(visible),
            "statistics": {
                "label": label,
                **breakdown.to_dict(),
                "text": country_statistics_text(label, breakdown),
            },
        }

    @app.get("/api/sites/{index}")
    def site(index: int) -> dict[str, object]:
        heritage = loaded_state()
        try:
            selected = heritage.select_site(index)
        except IndexError as exc:
            raise HTTPException(status_code=404, detail="Site not found") from exc

        payload: dict[str, object] = {"id": selected.index, "site": site_details(selected.site)}
        if selected.country_statistics is not None:
            payload["country_statistics"] = {
                "country": selected.site.country,
                **selected.country_statistics.to_dict(),
                "text": country_statistics_text(selected.site.country, selected.country_statistics),
            }
        return payload

    @app.get("/api/statistics")
    def statistics() -> dict[str, object]:
        return loaded_state().statistics.to_dict()

    @app.get("/api/statistics/{country}")
    def country_statistics(country: str) -> dict[str, object]:
        heritage = loaded_state()
        if country not in heritage.statistics.by_country:
            raise HTTPException(status_code=404, detail="Country not found")
        breakdown = heritage.statistics.for_country(country)
        return {"country": country, **breakdown.to_dict()}

    @app.get("/data/unesco-sites.json")
    def data_file() -> dict[str, object]:
        heritage = loaded_state()
        return {"type": "FeatureCollection", "features": [site.to_feature() for site in heritage.sites]}

    return app


def _render_page(
    templates: Jinja2Templates,
    heritage: AppState,
    panels: PanelConfig,
    request: Request | None = None,
) -> str:
    context = page_context(heritage, panels)
    context["request"] = request
    return templates.get_template("index.html").render(context)


def _default_app() -> FastAPI:
    load_env_file(BASE_DIR)
    settings = Settings.from_env()
    return create_app(
        data_source=settings.data_source,
        show_country_panel=settings.show_country_panel,
        timeout_seconds=settings.fetch_timeout_seconds,
    )


app = _default_app()
