"""In-memory item storage shared by the ``items`` route files."""

import threading
from dataclasses import asdict, dataclass


@dataclass(frozen=True, slots=True)
class Item:
    id: int
    title: str
    done: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


_items: dict[int, Item] = {}
_next_id = 1
_lock = threading.Lock()


def create(title: str) -> Item:
    global _next_id
    with _lock:
        item = Item(id=_next_id, title=title)
        _items[item.id] = item
        _next_id += 1
        return item


def get(item_id: int) -> Item | None:
    return _items.get(item_id)


def all_items() -> list[Item]:
    return sorted(_items.values(), key=lambda item: item.id)


def update(item_id: int, **changes) -> Item | None:
    with _lock:
        current = _items.get(item_id)
        if current is None:
            return None
        fields = {**asdict(current), **changes}
        item = Item(**fields)
        _items[item_id] = item
        return item


def remove(item_id: int) -> bool:
    with _lock:
        return _items.pop(item_id, None) is not None
