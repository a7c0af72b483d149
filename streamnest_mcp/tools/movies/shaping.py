"""Shape checks and list shaping applied to backend movie data."""

import json
from typing import Any

from streamnest_mcp.exceptions import InvalidBackendShapeError
from streamnest_mcp.tools.movies.client import excerpt

# Highest ranking value that counts as a recommendation
RECOMMENDED_MAX_RANK = 3
RECOMMENDED_LIMIT = 10
# Sort position for movies without a ranking value
UNRANKED = 999


def require_list(data: Any, what: str) -> list[Any]:
    """Return data if it is a JSON array, otherwise raise InvalidBackendShapeError."""
    if isinstance(data, list):
        return data

    if isinstance(data, dict) and data.get("error"):
        raise InvalidBackendShapeError(
            f"Backend returned an error instead of {what}: {data['error']}"
        )
    raise InvalidBackendShapeError(
        f"Backend returned {type(data).__name__} instead of a list of {what}: "
        f"{excerpt(json.dumps(data))}"
    )


def ranking_value(movie: Any) -> int | float | None:
    """Return the numeric ``ranking.ranking_value`` of a movie, if any."""
    if not isinstance(movie, dict):
        return None
    ranking = movie.get("ranking")
    if not isinstance(ranking, dict):
        return None
    value = ranking.get("ranking_value")
    # bool is an int subclass but never a rank
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def select_recommended(
    movies: list[Any],
    max_rank: int = RECOMMENDED_MAX_RANK,
    limit: int = RECOMMENDED_LIMIT,
) -> list[Any]:
    """
    Pick the best-ranked movies.

    Orders movies by rank (stable, so ties keep backend order; a missing
    rank counts as UNRANKED), keeps those ranked at most max_rank, and
    returns the first limit.
    When nothing qualifies, the first limit movies are returned unchanged.
    """
    def sort_key(movie: Any) -> int | float:
        rank = ranking_value(movie)
        return UNRANKED if rank is None else rank

    ranked = [movie for movie in sorted(movies, key=sort_key) if sort_key(movie) <= max_rank]
    if not ranked:
        return movies[:limit]
    return ranked[:limit]


def normalize_keyword(keyword: str) -> str:
    return keyword.strip().lower()


def _contains(value: Any, needle: str) -> bool:
    return isinstance(value, str) and needle in value.lower()


def matches_keyword(movie: Any, needle: str) -> bool:
    """Check title, genre names and admin review for a lower-cased needle."""
    if not isinstance(movie, dict):
        return False

    if _contains(movie.get("title"), needle):
        return True

    genres = movie.get("genre")
    if isinstance(genres, list):
        for genre in genres:
            if isinstance(genre, dict) and _contains(genre.get("genre_name"), needle):
                return True

    return _contains(movie.get("admin_review"), needle)


def filter_by_keyword(movies: list[Any], keyword: str) -> list[Any]:
    """Return movies matching keyword, in backend order."""
    needle = normalize_keyword(keyword)
    return [movie for movie in movies if matches_keyword(movie, needle)]
