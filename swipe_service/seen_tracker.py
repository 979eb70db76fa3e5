"""
Seen set derivation.

The seen set is never stored; it is recomputed from the session collections
every time it is needed so that it always reflects the latest feedback.
"""

from typing import Iterable, List, Set

from .models import Paper, SessionState


def seen_ids(liked: Iterable[Paper], disliked: Iterable[Paper], skipped_ids: Iterable[str]) -> Set[str]:
    """Return the ids the user must never be shown again."""
    seen = {p.paper_id for p in liked}
    seen.update(p.paper_id for p in disliked)
    seen.update(skipped_ids)
    return seen


def seen_for(state: SessionState) -> Set[str]:
    """Seen set of a session state."""
    return seen_ids(state.liked, state.disliked, state.skipped_ids)


def filter_unseen(papers: Iterable[Paper], seen: Set[str]) -> List[Paper]:
    """Drop already-seen papers and repeated ids, keeping upstream order."""
    kept: List[Paper] = []
    batch_ids: Set[str] = set()
    for paper in papers:
        if paper.paper_id in seen or paper.paper_id in batch_ids:
            continue
        batch_ids.add(paper.paper_id)
        kept.append(paper)
    return kept
