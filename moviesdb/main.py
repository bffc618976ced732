"""Main entry point for the moviesdb command line.

Sets up the Typer CLI application, wires dependencies (Composition Root),
defines one command per endpoint family, and prints results as JSON.
"""

import asyncio
import enum
import logging
from typing import Annotated, Any, Awaitable, Callable, Dict, List, Optional

import typer

from moviesdb.core.api_client import MoviesApiClient
from moviesdb.domain.models.errors import ConfigurationError, InvalidParameterError, MoviesApiError
from moviesdb.infrastructure.cli.display import ConsoleDisplay
from moviesdb.infrastructure.config.settings import get_config, load_configuration
from moviesdb.infrastructure.monitoring.event_logger import LoggingEventObserver
from moviesdb.infrastructure.monitoring.logger_setup import parse_log_level, setup_logging

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_INVALID_PARAMETER = 2

# --- Dependency Wiring ---

_dependencies: Dict[str, Any] = {}


def create_dependencies(log_level: Optional[str] = None) -> Dict[str, Any]:
    """Loads configuration, configures logging and builds the console display.

    The API client itself is built per command (see run_command) so that a
    missing API key only fails commands that need it.
    """
    load_configuration()
    level = parse_log_level(log_level or get_config("logging.level"))
    setup_logging(
        log_level=level,
        log_file=get_config("logging.file"),
        log_format=get_config("logging.format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
    )
    dependencies = {"ui": ConsoleDisplay(), "observer": LoggingEventObserver()}
    logger.debug("Dependencies initialized.")
    return dependencies


def run_command(action: Callable[[MoviesApiClient], Awaitable[Any]]) -> None:
    """Builds a client, runs `action` on it, prints the result or the failure."""
    if not _dependencies:
        _dependencies.update(create_dependencies())
    ui: ConsoleDisplay = _dependencies["ui"]

    async def runner() -> Any:
        async with MoviesApiClient.from_config(observer=_dependencies["observer"]) as client:
            return await action(client)

    try:
        data = asyncio.run(runner())
    except InvalidParameterError as e:
        ui.display_error(str(e), title="Invalid parameter")
        raise typer.Exit(code=EXIT_INVALID_PARAMETER)
    except ConfigurationError as e:
        ui.display_error(str(e), title="Configuration")
        raise typer.Exit(code=EXIT_FAILURE)
    except MoviesApiError as e:
        logger.debug(f"Command failed with {e.kind.value}", exc_info=True)
        ui.display_error(f"{e} (status={e.status_code}, attempts={e.attempts})", title=e.kind.value)
        raise typer.Exit(code=EXIT_FAILURE)
    if data is None or data == []:
        ui.display_info("No results.")
    ui.display_json(data)


async def _collect(iterator) -> List[Any]:
    return [item async for item in iterator]


# --- Typer App Definition ---

app = typer.Typer(
    name="moviesdb",
    help="Query the MoviesDatabase API (titles, search, actors, utilities) from the command line.",
    add_completion=False,
)


class SearchKind(str, enum.Enum):
    keyword = "keyword"
    title = "title"
    akas = "akas"


class UtilKind(str, enum.Enum):
    genres = "genres"
    title_types = "title-types"
    lists = "lists"


# Shared options
InfoOption = Annotated[Optional[str], typer.Option("--info", help="Info level, e.g. mini_info, base_info.")]
GenreOption = Annotated[Optional[str], typer.Option("--genre", "-g", help="Capitalized genre, e.g. 'Action'.")]
YearOption = Annotated[Optional[int], typer.Option("--year", "-y", help="Release year.")]
TitleTypeOption = Annotated[Optional[str], typer.Option("--title-type", help="e.g. movie, tvSeries.")]
SortOption = Annotated[Optional[str], typer.Option("--sort", help="year.incr or year.decr.")]
LimitOption = Annotated[Optional[int], typer.Option("--limit", "-l", help="Items per page (1-50).")]
PageOption = Annotated[int, typer.Option("--page", "-p", help="First page to fetch.")]
PagesOption = Annotated[int, typer.Option("--pages", help="Maximum number of pages to fetch.")]


@app.callback()
def main_callback(
    log_level: Annotated[
        Optional[str], typer.Option("--log-level", help="Logging level (debug, info, warning, error).")
    ] = None,
):
    """Configure logging before any command runs."""
    _dependencies.clear()
    _dependencies.update(create_dependencies(log_level))


@app.command()
def title(title_id: Annotated[str, typer.Argument(help="IMDb title id, e.g. tt0111161.")], info: InfoOption = None):
    """Show one title."""
    run_command(lambda client: client.get_title(title_id, info=info))


@app.command()
def ratings(title_id: Annotated[str, typer.Argument(help="IMDb title id.")]):
    """Show the rating of a title."""
    run_command(lambda client: client.get_title_ratings(title_id))


@app.command(name="by-ids")
def by_ids(
    title_ids: Annotated[List[str], typer.Argument(help="One or more IMDb title ids.")],
    info: InfoOption = None,
    list_name: Annotated[Optional[str], typer.Option("--list", help="Restrict to a title list.")] = None,
):
    """Show several titles at once."""
    run_command(lambda client: client.get_titles_by_ids(title_ids, info=info, list=list_name))


@app.command()
def titles(
    genre: GenreOption = None,
    year: YearOption = None,
    start_year: Annotated[Optional[int], typer.Option("--start-year")] = None,
    end_year: Annotated[Optional[int], typer.Option("--end-year")] = None,
    title_type: TitleTypeOption = None,
    list_name: Annotated[Optional[str], typer.Option("--list", help="e.g. most_pop_movies.")] = None,
    sort: SortOption = None,
    info: InfoOption = None,
    limit: LimitOption = None,
    page: PageOption = 1,
    pages: PagesOption = 1,
):
    """List titles matching the filters."""
    params = dict(genre=genre, year=year, startYear=start_year, endYear=end_year, titleType=title_type,
                  list=list_name, sort=sort, info=info, limit=limit, page=page)
    run_command(lambda client: _collect(client.iter_titles(max_pages=pages, **params)))


@app.command()
def upcoming(
    genre: GenreOption = None,
    year: YearOption = None,
    title_type: TitleTypeOption = None,
    sort: SortOption = None,
    info: InfoOption = None,
    limit: LimitOption = None,
    page: PageOption = 1,
    pages: PagesOption = 1,
):
    """List upcoming titles."""
    params = dict(genre=genre, year=year, titleType=title_type, sort=sort, info=info, limit=limit, page=page)
    run_command(lambda client: _collect(client.iter_upcoming(max_pages=pages, **params)))


@app.command()
def search(
    kind: Annotated[SearchKind, typer.Argument(help="keyword, title or akas.")],
    text: Annotated[str, typer.Argument(help="Text to search for.")],
    exact: Annotated[Optional[bool], typer.Option("--exact/--partial", help="Exact match (title/akas).")] = None,
    genre: GenreOption = None,
    year: YearOption = None,
    title_type: TitleTypeOption = None,
    sort: SortOption = None,
    info: InfoOption = None,
    limit: LimitOption = None,
    page: PageOption = 1,
    pages: PagesOption = 1,
):
    """Search titles by keyword, title or alternative title."""
    params = dict(genre=genre, year=year, titleType=title_type, sort=sort, info=info, limit=limit, page=page)
    if exact is not None:
        params["exact"] = exact

    def action(client: MoviesApiClient):
        if kind is SearchKind.keyword:
            iterator = client.iter_search_keyword(text, max_pages=pages, **params)
        elif kind is SearchKind.title:
            iterator = client.iter_search_title(text, max_pages=pages, **params)
        else:
            iterator = client.iter_search_akas(text, max_pages=pages, **params)
        return _collect(iterator)

    run_command(action)


@app.command()
def actors(limit: LimitOption = None, page: PageOption = 1, pages: PagesOption = 1):
    """List actors."""
    run_command(lambda client: _collect(client.iter_actors(max_pages=pages, limit=limit, page=page)))


@app.command()
def actor(actor_id: Annotated[str, typer.Argument(help="IMDb person id, e.g. nm0000151.")]):
    """Show one actor."""
    run_command(lambda client: client.get_actor(actor_id))


@app.command()
def episodes(
    series_id: Annotated[str, typer.Argument(help="IMDb id of the series.")],
    season: Annotated[Optional[int], typer.Option("--season", "-s", help="Only this season.")] = None,
):
    """List episode ids of a series (optionally of one season)."""
    if season is None:
        run_command(lambda client: client.get_series_episodes(series_id))
    else:
        run_command(lambda client: client.get_season_episodes(series_id, season))


@app.command()
def seasons(series_id: Annotated[str, typer.Argument(help="IMDb id of the series.")]):
    """Show the season summary of a series."""
    run_command(lambda client: client.get_seasons(series_id))


@app.command()
def episode(episode_id: Annotated[str, typer.Argument(help="IMDb id of the episode.")], info: InfoOption = None):
    """Show one episode."""
    run_command(lambda client: client.get_episode(episode_id, info=info))


@app.command()
def utils(what: Annotated[UtilKind, typer.Argument(help="genres, title-types or lists.")]):
    """Show the provider's utility lookups."""
    if what is UtilKind.genres:
        run_command(lambda client: client.get_genres())
    elif what is UtilKind.title_types:
        run_command(lambda client: client.get_title_types())
    else:
        run_command(lambda client: client.get_lists())


# --- Main Execution Guard ---

def cli_entry_point():
    """Function called by the console script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
