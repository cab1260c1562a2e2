from typing import Any, Dict

from .KeySearch import SearchResult


def keys_collected(result: SearchResult) -> int:
    return len(set(result.route))


def revisits(result: SearchResult) -> int:
    """Number of legs that walk back to a key already held."""
    return len(result.route) - keys_collected(result)


def search_metrics(result: SearchResult) -> Dict[str, Any]:
    return {
        "total_steps": result.steps,
        "keys_collected": keys_collected(result),
        "revisits": revisits(result),
        "states_expanded": result.expanded,
        "states_pushed": result.pushed,
        "memo_size": result.memo_size,
    }
