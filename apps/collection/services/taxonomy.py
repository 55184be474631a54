"""Editable option lists shown in item forms and filters."""

from typing import Dict, Iterable, List

from ..models import ItemCategory, ItemStatus, PaymentStatus, SourceType


class TaxonomyList:
    """
    Ordered list of unique display labels.

    Lists are presentation only: stored item values stay the closed
    enum codes regardless of how a list is edited.
    """

    def __init__(self, labels: Iterable[str] = ()):
        self._labels: List[str] = []
        for label in labels:
            self.add(label)

    @classmethod
    def from_choices(cls, choices) -> 'TaxonomyList':
        return cls(str(label) for _, label in choices)

    @property
    def labels(self) -> List[str]:
        return list(self._labels)

    def __len__(self):
        return len(self._labels)

    def __contains__(self, label):
        return label in self._labels

    def add(self, label: str) -> bool:
        """Append a trimmed label. Returns False for blanks and duplicates."""
        label = (label or '').strip()
        if not label or label in self._labels:
            return False
        self._labels.append(label)
        return True

    def remove(self, label: str) -> bool:
        if label not in self._labels:
            return False
        self._labels.remove(label)
        return True

    def move(self, label: str, offset: int) -> bool:
        """
        Swap a label with its neighbour.

        Args:
            label: Label to move
            offset: -1 to move up, +1 to move down

        Returns:
            False when the label is missing or already at that end
        """
        if label not in self._labels:
            return False

        index = self._labels.index(label)
        target = index + offset
        if target < 0 or target >= len(self._labels):
            return False

        self._labels[index], self._labels[target] = self._labels[target], self._labels[index]
        return True

    def move_up(self, label: str) -> bool:
        return self.move(label, -1)

    def move_down(self, label: str) -> bool:
        return self.move(label, 1)


def default_taxonomies() -> Dict[str, List[str]]:
    """Initial option lists, seeded from the enum labels."""
    return {
        'category': TaxonomyList.from_choices(ItemCategory.choices).labels,
        'source_type': TaxonomyList.from_choices(SourceType.choices).labels,
        'status': TaxonomyList.from_choices(ItemStatus.choices).labels,
        'payment_status': TaxonomyList.from_choices(PaymentStatus.choices).labels,
    }


def edit_taxonomy(labels: Iterable[str], *, operation: str, label: str) -> List[str]:
    """
    Apply one edit to a client-held list and return the result.

    Raises:
        ValueError: If the operation is unknown
    """
    taxonomy = TaxonomyList(labels)
    operations = {
        'add': taxonomy.add,
        'remove': taxonomy.remove,
        'move_up': taxonomy.move_up,
        'move_down': taxonomy.move_down,
    }

    if operation not in operations:
        raise ValueError(f"Unknown taxonomy operation '{operation}'")

    operations[operation](label)
    return taxonomy.labels
