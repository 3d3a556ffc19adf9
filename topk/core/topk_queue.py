# topk/core/topk_queue.py
from __future__ import annotations

import heapq
import logging
import numbers
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterable, Iterator, List, Sequence, TypeVar, overload

from .comparators import key_comparator

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Orden estricto: is_less(a, b) es True si 'a' va estrictamente por debajo de 'b'.
Less = Callable[[Any, Any], bool]


class InvalidCapacityError(ValueError):
    """Capacidad K no válida (debe ser un entero > 0)."""
    pass


class EmptyQueueError(IndexError):
    """Acceso al mínimo de una cola vacía. Es un error del llamante."""
    pass


@dataclass(slots=True, eq=False)
class _Entry(Generic[T]):
    """Hueco del montón: heapq solo usa '<', que delegamos en el comparador."""
    value: T
    is_less: Less

    def __lt__(self, other: _Entry[T]) -> bool:
        return self.is_less(self.value, other.value)


class HeapView(Sequence[T]):
    """
    Vista viva y de solo lectura sobre los elementos retenidos, en orden de montón.

    No copia nada: refleja las inserciones posteriores de la cola.
    No existe forma de modificar la cola a través de la vista.
    """
    __slots__ = ("_entries",)

    def __init__(self, entries: List[_Entry[T]]) -> None:
        self._entries = entries

    def __len__(self) -> int:
        return len(self._entries)

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> List[T]: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [e.value for e in self._entries[index]]
        return self._entries[index].value

    def __iter__(self) -> Iterator[T]:
        for e in self._entries:
            yield e.value

    def __repr__(self) -> str:
        return f"HeapView({[e.value for e in self._entries]!r})"


@dataclass(frozen=True, eq=False, repr=False)
class TopKQueue(Generic[T]):
    """
    Cola de prioridad acotada genérica.
    Mantiene los K mayores elementos vistos según el comparador 'is_less'.

    Fases:
      - llenado (len < k): toda inserción se acepta.
      - saturada (len == k): solo entra un elemento estrictamente mayor que
        el mínimo actual, que es expulsado. En caso de empate gana el que
        ya estaba dentro.

    Si el comparador lanza una excepción, se propaga tal cual y el estado
    de la cola queda indefinido.
    No es thread-safe: la sincronización es responsabilidad del llamante.
    """
    k: int
    is_less: Less

    # Min-heap: _heap[0] es el peor de los K mejores.
    _heap: List[_Entry[T]] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        if isinstance(self.k, bool) or not isinstance(self.k, numbers.Integral):
            raise InvalidCapacityError(f"k debe ser un entero, recibido {type(self.k).__name__}")
        if self.k <= 0:
            raise InvalidCapacityError(f"k debe ser > 0, recibido {self.k}")
        if not callable(self.is_less):
            raise TypeError("is_less debe ser invocable")
        object.__setattr__(self, "k", int(self.k))
        logger.debug("TopKQueue creada con k=%d", self.k)

    @classmethod
    def by_key(cls, k: int, key: Callable[[T], Any]) -> TopKQueue[T]:
        """Cola ordenada por key(item) (mayor es mejor)."""
        return cls(k, key_comparator(key))

    def push(self, item: T) -> None:
        """Inserta 'item' si está entre los K mejores vistos. O(log k)."""
        heap = self._heap
        if len(heap) < self.k:
            heapq.heappush(heap, _Entry(item, self.is_less))
            if len(heap) == self.k:
                logger.debug("TopKQueue saturada (k=%d)", self.k)
        elif self.is_less(heap[0].value, item):
            heapq.heapreplace(heap, _Entry(item, self.is_less))

    def extend(self, items: Iterable[T]) -> None:
        for item in items:
            self.push(item)

    def peek(self) -> T:
        """Devuelve el mínimo retenido (el próximo candidato a salir)."""
        if not self._heap:
            raise EmptyQueueError("peek() sobre una TopKQueue vacía")
        return self._heap[0].value

    def get(self) -> HeapView[T]:
        """
        Devuelve los elementos retenidos en orden de montón, en O(1).
        Es una vista viva: no debe usarse para reordenar la cola.
        """
        return HeapView(self._heap)

    def best_first(self) -> List[T]:
        """Devuelve una lista nueva con los items de MAYOR a MENOR. O(k log k)."""
        return [e.value for e in sorted(self._heap, reverse=True)]

    @property
    def is_full(self) -> bool:
        return len(self._heap) == self.k

    def __len__(self) -> int:
        return len(self._heap)

    def __repr__(self) -> str:
        return f"TopKQueue(k={self.k}, size={len(self._heap)})"
