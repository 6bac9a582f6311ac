from typing import List, Sequence, TypeVar

T = TypeVar("T")


def reorder(items: Sequence[T], source_index: int, destination_index: int) -> List[T]:
    """
    Перемещение элемента при drag-and-drop

    Элемент вырезается из позиции source_index и вставляется в
    destination_index. Исходная последовательность не меняется.
    """
    size = len(items)
    if not 0 <= source_index < size:
        raise IndexError(f"source_index {source_index} out of range 0..{size - 1}")
    if not 0 <= destination_index < size:
        raise IndexError(f"destination_index {destination_index} out of range 0..{size - 1}")

    result = list(items)
    moved = result.pop(source_index)
    result.insert(destination_index, moved)
    return result


def assign_order(items, attr: str = "order") -> list:
    """Проставить order = позиция; возвращает элементы, у которых order изменился"""
    changed = []
    for position, item in enumerate(items):
        if getattr(item, attr) != position:
            setattr(item, attr, position)
            changed.append(item)
    return changed
