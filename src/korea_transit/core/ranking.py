"""Match ranking for name searches."""

from collections.abc import Callable, Iterable
from typing import NamedTuple, TypeVar

from ..utils.korean_text import starts_with_text

RecordT = TypeVar("RecordT")


class MatchKey(NamedTuple):
    """Sort key: prefix matches first, then shorter names."""

    not_prefix: bool
    name_length: int


def match_key(name: str, query: str) -> MatchKey:
    return MatchKey(not_prefix=not starts_with_text(name, query), name_length=len(name))


def rank_by_name(
    candidates: Iterable[RecordT], query: str, name: Callable[[RecordT], str]
) -> list[RecordT]:
    """Order candidates by match quality against ``query``.

    Names starting with the query come first; within each group shorter
    names rank higher. Equal keys keep their original order.
    """
    return sorted(candidates, key=lambda record: match_key(name(record) or "", query))
