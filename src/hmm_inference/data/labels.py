"""Human-readable names for states and evidence symbols.

The inference core works purely with indices; a :class:`LabelSet` maps the
names a user types (``"rain"``, ``"umbrella"``) to those indices and back.
"""

from typing import Iterable, Iterator, List, Sequence

from ..exceptions import LabelError


class LabelSet:
    """Ordered collection of unique, non-empty labels.

    Parameters
    ----------
    names : Iterable[str]
        Labels in index order

    Examples
    --------
    >>> states = LabelSet(['rain', 'dry'])
    >>> states.index('dry')
    1
    >>> states.decode([0, 1, 0])
    ['rain', 'dry', 'rain']
    """

    def __init__(self, names: Iterable[str]):
        self._names = [str(name).strip() for name in names]

        if not self._names:
            raise LabelError("A label set needs at least one label")
        if any(not name for name in self._names):
            raise LabelError("Labels must be non-empty", got=str(self._names))

        self._index = {}
        for i, name in enumerate(self._names):
            if name in self._index:
                raise LabelError(f"Duplicate label '{name}'", got=str(self._names))
            self._index[name] = i

    @classmethod
    def default(cls, prefix: str, size: int) -> 'LabelSet':
        """Generated labels ``prefix0, prefix1, ...``.

        >>> LabelSet.default('s', 3).names
        ['s0', 's1', 's2']
        """
        if size < 1:
            raise LabelError(f"Label set size must be positive, got {size}")
        return cls(f"{prefix}{i}" for i in range(size))

    @property
    def names(self) -> List[str]:
        return list(self._names)

    def index(self, name: str) -> int:
        try:
            return self._index[str(name).strip()]
        except KeyError:
            raise LabelError(
                f"Unknown label '{name}'",
                expected=f"one of {self._names}",
            ) from None

    def name(self, index: int) -> str:
        if not 0 <= index < len(self._names):
            raise LabelError(f"Label index {index} out of range [0, {len(self._names)})")
        return self._names[index]

    def encode(self, names: Sequence[str]) -> List[int]:
        return [self.index(name) for name in names]

    def decode(self, indices: Sequence[int]) -> List[str]:
        return [self.name(int(i)) for i in indices]

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip() in self._index

    def __eq__(self, other: object) -> bool:
        return isinstance(other, LabelSet) and self._names == other._names

    def __repr__(self) -> str:
        return f"LabelSet({self._names})"
