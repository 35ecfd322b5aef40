from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..remote import RemoteClient
from . import crud_profile


async def list_reviews(remote: RemoteClient, artist_id: str) -> List[Dict[str, Any]]:
    result = await remote.table("artist_reviews").select("*").eq("artist_id", artist_id).order("created_at", desc=True).execute()
    rows = result.raise_for_error() or []
    return await crud_profile.attach_parties(remote, rows, id_key="planner_id", as_key="planner")


async def upsert_review(
    remote: RemoteClient,
    artist_id: str,
    planner_id: str,
    rating: int,
    review_text: Optional[str],
) -> Dict[str, Any]:
    row = {"artist_id": artist_id, "planner_id": planner_id, "rating": rating, "review_text": review_text}
    result = await remote.table("artist_reviews").upsert(row, on_conflict="artist_id,planner_id").single().execute()
    return result.raise_for_error()


async def rating_summary(remote: RemoteClient, artist_ids: Iterable[str]) -> Dict[str, Tuple[float, int]]:
    ids = sorted({a for a in artist_ids if a})
    if not ids:
        return {}
    result = await remote.table("artist_reviews").select("artist_id,rating").in_("artist_id", ids).execute()
    totals: Dict[str, List[int]] = {}
    for row in result.raise_for_error() or []:
        totals.setdefault(row["artist_id"], []).append(int(row["rating"]))
    return {aid: (round(sum(r) / len(r), 2), len(r)) for aid, r in totals.items()}
