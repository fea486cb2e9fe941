"""
Numerical Safeguards — численные защиты для геометрии

Модуль обеспечивает численную устойчивость геометрических операций:
- Безопасное деление для проекций точки на отрезок (нулевая длина отрезка)
- NaN/Inf проверки входных координат
- Epsilon-защиты для знака ориентации и длин рёбер
- Валидация параметров конфигураций

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Деление на ноль никогда не происходит (возвращается fallback)
2. NaN/Inf координаты отклоняются на входе, а не распространяются
3. Знак ориентации (cross product) сравнивается с epsilon, а не с точным нулём
4. Все операции детерминированы и воспроизводимы
"""

import math
from typing import Final

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Epsilon для расстояний в метрах (длина ребра, расстояние до отрезка)
EPS_METERS: Final[float] = 1e-6

# Epsilon для cross product в градусах² (знак ориентации трёх точек)
# 1 м ≈ 9e-6°, поэтому реальные повороты дают |cross| >> 1e-18
EPS_ORIENTATION: Final[float] = 1e-18

# Epsilon для общих вычислений
EPS_CALC: Final[float] = 1e-12


# =============================================================================
# БЕЗОПАСНОЕ ДЕЛЕНИЕ
# =============================================================================


def safe_divide(
    numerator: float,
    denominator: float,
    eps: float = EPS_CALC,
    fallback: float = 0.0,
) -> float:
    """
    Безопасное деление с защитой от деления на ноль и NaN/Inf.

    Используется в проекции точки на отрезок: для вырожденного отрезка
    (длина ≈ 0) параметр проекции не определён, возвращается fallback.

    Args:
        numerator: Числитель
        denominator: Знаменатель
        eps: Минимальный абсолютный порог для знаменателя
        fallback: Значение при |denominator| < eps (default: 0.0)

    Returns:
        numerator / denominator или fallback

    Examples:
        >>> safe_divide(10.0, 2.0)
        5.0
        >>> safe_divide(10.0, 0.0)
        0.0
        >>> safe_divide(1.0, 1e-20, fallback=-1.0)
        -1.0
    """
    if not is_valid_float(numerator) or not is_valid_float(denominator):
        return fallback

    if abs(denominator) < eps:
        return fallback

    result = numerator / denominator
    if not is_valid_float(result):
        return fallback
    return result


# =============================================================================
# NaN/Inf ПРОВЕРКИ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли float валидным (не NaN, не Inf).

    Args:
        value: Проверяемое значение

    Returns:
        True если значение конечное
    """
    return math.isfinite(value)


# =============================================================================
# ЗНАК С ТОЛЕРАНТНОСТЬЮ
# =============================================================================


def sign_with_tolerance(value: float, tol: float = EPS_ORIENTATION) -> int:
    """
    Знак значения с мёртвой зоной вокруг нуля.

    Используется для знака ориентации трёх точек: значения в пределах
    tol считаются коллинеарными.

    Returns:
        -1, 0 или +1

    Examples:
        >>> sign_with_tolerance(1e-9)
        1
        >>> sign_with_tolerance(-1e-9)
        -1
        >>> sign_with_tolerance(1e-20)
        0
    """
    if value > tol:
        return 1
    if value < -tol:
        return -1
    return 0


# =============================================================================
# УТИЛИТЫ
# =============================================================================


def clamp(
    value: float,
    min_value: float | None = None,
    max_value: float | None = None,
) -> float:
    """
    Ограничение значения в заданном диапазоне.

    Examples:
        >>> clamp(5.0, 0.0, 10.0)
        5.0
        >>> clamp(-1.0, 0.0, 10.0)
        0.0
        >>> clamp(15.0, 0.0, 10.0)
        10.0
    """
    result = value

    if min_value is not None:
        result = max(result, min_value)

    if max_value is not None:
        result = min(result, max_value)

    return result


# =============================================================================
# ВАЛИДАЦИЯ И ПРОВЕРКИ
# =============================================================================


def validate_positive(value: float, name: str, eps: float = EPS_CALC) -> None:
    """
    Валидация, что значение положительное.

    Raises:
        ValueError: Если value <= eps или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if value <= eps:
        raise ValueError(f"{name} must be positive (> {eps}), got {value}")


def validate_non_negative(value: float, name: str) -> None:
    """
    Валидация, что значение неотрицательное.

    Raises:
        ValueError: Если value < 0 или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")


def validate_in_range(
    value: float,
    name: str,
    min_value: float | None = None,
    max_value: float | None = None,
) -> None:
    """
    Валидация, что значение в заданном диапазоне.

    Используется для проверки широты [-90, 90] и долготы [-180, 180].

    Raises:
        ValueError: Если value вне диапазона или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if min_value is not None and value < min_value:
        raise ValueError(f"{name} must be >= {min_value}, got {value}")

    if max_value is not None and value > max_value:
        raise ValueError(f"{name} must be <= {max_value}, got {value}")
