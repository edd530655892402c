from typing import Callable, Dict, Hashable, Iterable, List, Optional, TypeVar

T = TypeVar('T')
K = TypeVar('K', bound=Hashable)
V = TypeVar('V')


def group_by(
        items: Iterable[T],
        key_fn: Callable[[T], K],
        value_fn: Optional[Callable[[T], V]] = None
) -> Dict[K, List[V]]:
    """
    Groups items by key, keeping both the first-seen key order and the item order
    inside every group.
    """
    groups: Dict[K, List[V]] = {}
    for item in items:
        value = value_fn(item) if value_fn else item
        groups.setdefault(key_fn(item), []).append(value)
    return groups
