"""Validation of path and query parameters before dispatch.

Every value is checked against the endpoint catalog and the documented value
domains; a violation raises InvalidParameterError before any request is made.
Accepted values are serialized to their query-string form.
"""

from typing import Any, Callable, Dict, Mapping, Sequence

from moviesdb.domain.models.common import (
    ACTOR_ID_PATTERN, TITLE_ID_PATTERN, ActorId, QueryParams, TitleId, WireParams,
)
from moviesdb.domain.models.endpoints import (
    GENRES, INFO_LEVELS, MAX_LIMIT, MIN_LIMIT, SORT_VALUES, TITLE_LISTS,
    EndpointDescriptor, PathParamKind,
)
from moviesdb.domain.models.errors import InvalidParameterError


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# --- Path parameters ---

def validate_title_id(value: Any, parameter: str = "title_id") -> TitleId:
    if not isinstance(value, str) or not TITLE_ID_PATTERN.fullmatch(value):
        raise InvalidParameterError(parameter, value, "expected an IMDb title id like 'tt0111161'")
    return TitleId(value)


def validate_actor_id(value: Any, parameter: str = "actor_id") -> ActorId:
    if not isinstance(value, str) or not ACTOR_ID_PATTERN.fullmatch(value):
        raise InvalidParameterError(parameter, value, "expected an IMDb person id like 'nm0000151'")
    return ActorId(value)


def validate_season(value: Any, parameter: str = "season") -> int:
    if not _is_int(value) or value < 1:
        raise InvalidParameterError(parameter, value, "expected an integer >= 1")
    return value


def validate_text(value: Any, parameter: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidParameterError(parameter, value, "expected non-empty text")
    return value.strip()


_PATH_VALIDATORS: Dict[PathParamKind, Callable[[Any, str], Any]] = {
    PathParamKind.TITLE_ID: validate_title_id,
    PathParamKind.ACTOR_ID: validate_actor_id,
    PathParamKind.SEASON: validate_season,
    PathParamKind.TEXT: validate_text,
}


def build_path(descriptor: EndpointDescriptor, **path_values: Any) -> str:
    """Validates path values against the descriptor and fills its template."""
    expected = {name for name, _ in descriptor.path_params}
    unexpected = set(path_values) - expected
    if unexpected:
        name = sorted(unexpected)[0]
        raise InvalidParameterError(name, path_values[name], f"not a path parameter of {descriptor.name}")
    checked = {}
    for name, kind in descriptor.path_params:
        if name not in path_values:
            raise InvalidParameterError(name, None, "required path parameter is missing")
        checked[name] = _PATH_VALIDATORS[kind](path_values[name], name)
    return descriptor.build_path(**checked)


# --- Query parameters ---

def _genre(name: str, value: Any) -> str:
    # Case-sensitive on purpose: the API only knows capitalized genres.
    if not isinstance(value, str) or value not in GENRES:
        raise InvalidParameterError(name, value, "unknown genre (case-sensitive, e.g. 'Action')")
    return value


def _limit(name: str, value: Any) -> str:
    if not _is_int(value) or not MIN_LIMIT <= value <= MAX_LIMIT:
        raise InvalidParameterError(name, value, f"expected an integer in [{MIN_LIMIT}, {MAX_LIMIT}]")
    return str(value)


def _page(name: str, value: Any) -> str:
    if not _is_int(value) or value < 1:
        raise InvalidParameterError(name, value, "expected an integer >= 1")
    return str(value)


def _year(name: str, value: Any) -> str:
    if not _is_int(value) or not 1000 <= value <= 9999:
        raise InvalidParameterError(name, value, "expected a four-digit year")
    return str(value)


def _one_of(domain: frozenset, label: str) -> Callable[[str, Any], str]:
    def check(name: str, value: Any) -> str:
        if not isinstance(value, str) or value not in domain:
            raise InvalidParameterError(name, value, f"expected one of the documented {label}")
        return value
    return check


def _non_empty_text(name: str, value: Any) -> str:
    return validate_text(value, name)


def _flag(name: str, value: Any) -> str:
    if not isinstance(value, bool):
        raise InvalidParameterError(name, value, "expected a boolean")
    return "true" if value else "false"


def _ids_list(name: str, value: Any) -> str:
    if isinstance(value, str) or not isinstance(value, Sequence) or not value:
        raise InvalidParameterError(name, value, "expected a non-empty sequence of title ids")
    return ",".join(validate_title_id(title_id, name) for title_id in value)


QUERY_RULES: Mapping[str, Callable[[str, Any], str]] = {
    "genre": _genre,
    "limit": _limit,
    "page": _page,
    "year": _year,
    "startYear": _year,
    "endYear": _year,
    "sort": _one_of(SORT_VALUES, "sort orders (year.incr, year.decr)"),
    "info": _one_of(INFO_LEVELS, "info levels"),
    "list": _one_of(TITLE_LISTS, "title lists"),
    "titleType": _non_empty_text,
    "exact": _flag,
    "idsList": _ids_list,
}


def serialize_query_params(descriptor: EndpointDescriptor, params: QueryParams) -> WireParams:
    """Checks `params` against the descriptor and returns query-string values.

    None values are treated as "not given" and dropped.

    Raises:
        InvalidParameterError: Unknown parameter for this endpoint or value out of domain.
    """
    wire: Dict[str, str] = {}
    for name, value in params.items():
        if value is None:
            continue
        if name not in descriptor.allowed_params:
            raise InvalidParameterError(name, value, f"not accepted by {descriptor.name}")
        wire[name] = QUERY_RULES[name](name, value)
    return WireParams(wire)
