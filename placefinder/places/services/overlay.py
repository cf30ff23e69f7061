from typing import List, Optional

from placefinder.places.schemas import SearchResult


class FavoriteOverlay:
    """Marks an already-fetched page with the user's favorite status."""

    def __init__(self, favorites):
        self.favorites = favorites

    def apply(self, results: List[SearchResult], user_id: Optional[int]) -> List[SearchResult]:
        # No user: leave is_favorited unset so it is omitted, not false
        if user_id is None or not results:
            return results

        favorited = self.favorites.favorited_place_ids(user_id, [r.id for r in results])
        for result in results:
            result.is_favorited = result.id in favorited
        return results
