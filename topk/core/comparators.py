# topk/core/comparators.py
from __future__ import annotations

from typing import Any, Callable, Tuple

import numpy as np

_INT_TYPES: Tuple[type, ...] = (int, np.integer)
_FLOAT_TYPES: Tuple[type, ...] = (float, np.floating)
_STR_TYPES: Tuple[type, ...] = (str,)


def _check(value: Any, types: Tuple[type, ...], name: str) -> Any:
    # bool es subclase de int, pero no es un número válido aquí
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, types):
        raise TypeError(f"{name}: tipo no soportado {type(value).__name__}")
    return value


def int_less(a: Any, b: Any) -> bool:
    """Orden ascendente de enteros (admite escalares enteros de numpy)."""
    return _check(a, _INT_TYPES, "int_less") < _check(b, _INT_TYPES, "int_less")


def float_less(a: Any, b: Any) -> bool:
    """Orden ascendente de flotantes (admite np.float32/np.float64)."""
    return _check(a, _FLOAT_TYPES, "float_less") < _check(b, _FLOAT_TYPES, "float_less")


def str_less(a: Any, b: Any) -> bool:
    """Orden lexicográfico ascendente de cadenas."""
    return _check(a, _STR_TYPES, "str_less") < _check(b, _STR_TYPES, "str_less")


def key_comparator(key: Callable[[Any], Any]) -> Callable[[Any, Any], bool]:
    """
    Construye un comparador a partir de una función de puntuación.
    Mayor key(x) significa mejor, como la 'utility' de los resultados.
    """
    def is_less(a: Any, b: Any) -> bool:
        return key(a) < key(b)

    return is_less


def reverse_comparator(is_less: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    """Invierte el orden: con él la cola guarda los K menores."""
    def reversed_less(a: Any, b: Any) -> bool:
        return is_less(b, a)

    return reversed_less
