"""Defines common Value Objects used across the client.

These objects represent simple values like IMDb identifiers, query parameter
mappings and result items, keeping signatures readable and consistent.
"""

import re
from typing import Any, Dict, Mapping, NewType

# === Identifiers ===
TitleId = NewType("TitleId", str)    # IMDb title id, e.g. 'tt0111161'
ActorId = NewType("ActorId", str)    # IMDb person id, e.g. 'nm0000151'

TITLE_ID_PATTERN = re.compile(r"tt[0-9]+")
ACTOR_ID_PATTERN = re.compile(r"nm[0-9]+")

# === Request side ===
QueryParams = Dict[str, Any]           # parameter name -> value, before serialization
WireParams = NewType("WireParams", Dict[str, str])  # query string ready values

# === Response side ===
# Items are passed through unchanged; shape depends on the requested info level.
Item = Mapping[str, Any]

# === Caching Context ===
CacheKey = NewType("CacheKey", str)
