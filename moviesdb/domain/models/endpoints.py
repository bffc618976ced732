"""Static catalog of the documented movies API endpoints.

Every endpoint the client can call is described exactly once here: its path
template, the path and query parameters it accepts, whether it is paginated,
and what its `results` look like. Nothing else in the package formats paths.
"""

import enum
from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Tuple
from urllib.parse import quote

# --- Value domains ---

GENRES: FrozenSet[str] = frozenset({
    "Action", "Adult", "Adventure", "Animation", "Biography", "Comedy",
    "Crime", "Documentary", "Drama", "Family", "Fantasy", "Film-Noir",
    "Game-Show", "History", "Horror", "Music", "Musical", "Mystery", "News",
    "Reality-TV", "Romance", "Sci-Fi", "Short", "Sport", "Talk-Show",
    "Thriller", "War", "Western",
})

SORT_VALUES: FrozenSet[str] = frozenset({"year.incr", "year.decr"})

INFO_LEVELS: FrozenSet[str] = frozenset({
    "mini_info", "base_info", "image", "creators_directors_writers",
    "revenue_budget", "extendedCast", "rating", "awards", "custom_info",
})

TITLE_LISTS: FrozenSet[str] = frozenset({
    "most_pop_movies", "most_pop_series", "titles", "top_boxoffice_200",
    "top_boxoffice_last_weekend_10", "top_rated_250", "top_rated_english_250",
    "top_rated_lowest_100", "top_rated_series_250",
})

MIN_LIMIT = 1
MAX_LIMIT = 50


class Endpoint(str, enum.Enum):
    """Identity of each documented endpoint."""
    TITLES = "titles"
    TITLES_BY_IDS = "titles_by_ids"
    TITLE = "title"
    TITLE_RATINGS = "title_ratings"
    UPCOMING = "upcoming"
    SERIES_EPISODES = "series_episodes"
    SERIES_SEASONS = "series_seasons"
    SEASON_EPISODES = "season_episodes"
    EPISODE = "episode"
    SEARCH_KEYWORD = "search_keyword"
    SEARCH_TITLE = "search_title"
    SEARCH_AKAS = "search_akas"
    ACTORS = "actors"
    ACTOR = "actor"
    UTILS_TITLE_TYPES = "utils_title_types"
    UTILS_GENRES = "utils_genres"
    UTILS_LISTS = "utils_lists"


class ResultShape(str, enum.Enum):
    """What the `results` member of a success envelope holds."""
    LIST = "list"        # sequence of mappings, each carrying the id field
    OBJECT = "object"    # a single mapping carrying the id field, or null
    VALUES = "values"    # sequence of scalars (utility lookups)
    ANY = "any"          # passed through without structural checks


class PathParamKind(str, enum.Enum):
    TITLE_ID = "title_id"
    ACTOR_ID = "actor_id"
    SEASON = "season"
    TEXT = "text"


@dataclass(frozen=True)
class EndpointDescriptor:
    """Immutable description of one endpoint."""
    endpoint: Endpoint
    path_template: str
    result_shape: ResultShape
    allowed_params: FrozenSet[str] = frozenset()
    path_params: Tuple[Tuple[str, PathParamKind], ...] = ()
    paginated: bool = False
    id_field: Optional[str] = "id"
    method: str = "GET"

    @property
    def name(self) -> str:
        return self.endpoint.value

    def build_path(self, **path_values: object) -> str:
        """Fills the path template; values are URL-quoted as path segments."""
        quoted = {key: quote(str(value), safe="") for key, value in path_values.items()}
        return self.path_template.format(**quoted)


# --- Query parameter sets ---

_LISTING_PARAMS = frozenset({
    "genre", "year", "startYear", "endYear", "titleType", "sort", "page", "limit", "info",
})
_TITLES_PARAMS = _LISTING_PARAMS | {"list"}
_SEARCH_PARAMS = _LISTING_PARAMS | {"exact", "list"}
_KEYWORD_PARAMS = _LISTING_PARAMS
_PAGING_PARAMS = frozenset({"page", "limit"})

_TITLE = (("title_id", PathParamKind.TITLE_ID),)


def _descriptor(*args, **kwargs) -> Tuple[Endpoint, EndpointDescriptor]:
    descriptor = EndpointDescriptor(*args, **kwargs)
    return descriptor.endpoint, descriptor


ENDPOINTS: Mapping[Endpoint, EndpointDescriptor] = MappingProxyType(dict([
    # Titles
    _descriptor(Endpoint.TITLES, "/titles", ResultShape.LIST,
                allowed_params=_TITLES_PARAMS, paginated=True),
    _descriptor(Endpoint.TITLES_BY_IDS, "/x/titles-by-ids", ResultShape.LIST,
                allowed_params=frozenset({"idsList", "list", "info"})),
    _descriptor(Endpoint.TITLE, "/titles/{title_id}", ResultShape.OBJECT,
                allowed_params=frozenset({"info"}), path_params=_TITLE),
    _descriptor(Endpoint.TITLE_RATINGS, "/titles/{title_id}/ratings", ResultShape.OBJECT,
                path_params=_TITLE, id_field="tconst"),
    _descriptor(Endpoint.UPCOMING, "/titles/x/upcoming", ResultShape.LIST,
                allowed_params=_LISTING_PARAMS, paginated=True),
    # Series
    _descriptor(Endpoint.SERIES_EPISODES, "/titles/series/{title_id}", ResultShape.LIST,
                path_params=_TITLE, id_field="tconst"),
    _descriptor(Endpoint.SERIES_SEASONS, "/titles/seasons/{title_id}", ResultShape.ANY,
                path_params=_TITLE, id_field=None),
    _descriptor(Endpoint.SEASON_EPISODES, "/titles/series/{title_id}/{season}", ResultShape.LIST,
                path_params=_TITLE + (("season", PathParamKind.SEASON),), id_field="tconst"),
    _descriptor(Endpoint.EPISODE, "/titles/episode/{title_id}", ResultShape.OBJECT,
                allowed_params=frozenset({"info"}), path_params=_TITLE),
    # Search
    _descriptor(Endpoint.SEARCH_KEYWORD, "/titles/search/keyword/{keyword}", ResultShape.LIST,
                allowed_params=_KEYWORD_PARAMS, path_params=(("keyword", PathParamKind.TEXT),),
                paginated=True),
    _descriptor(Endpoint.SEARCH_TITLE, "/titles/search/title/{title}", ResultShape.LIST,
                allowed_params=_SEARCH_PARAMS, path_params=(("title", PathParamKind.TEXT),),
                paginated=True),
    _descriptor(Endpoint.SEARCH_AKAS, "/titles/search/akas/{aka}", ResultShape.LIST,
                allowed_params=_SEARCH_PARAMS - {"list"}, path_params=(("aka", PathParamKind.TEXT),),
                paginated=True),
    # Actors
    _descriptor(Endpoint.ACTORS, "/actors", ResultShape.LIST,
                allowed_params=_PAGING_PARAMS, paginated=True, id_field="nconst"),
    _descriptor(Endpoint.ACTOR, "/actors/{actor_id}", ResultShape.OBJECT,
                path_params=(("actor_id", PathParamKind.ACTOR_ID),), id_field="nconst"),
    # Utils
    _descriptor(Endpoint.UTILS_TITLE_TYPES, "/titles/utils/titleTypes", ResultShape.VALUES, id_field=None),
    _descriptor(Endpoint.UTILS_GENRES, "/titles/utils/genres", ResultShape.VALUES, id_field=None),
    _descriptor(Endpoint.UTILS_LISTS, "/titles/utils/lists", ResultShape.VALUES, id_field=None),
]))


def get_descriptor(endpoint: Endpoint) -> EndpointDescriptor:
    return ENDPOINTS[endpoint]
