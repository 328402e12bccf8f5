"""
Least-squares fitting of closed-form motion models.

Every model is linear in its unknowns after an optional transform, so all fits
reduce to the normal equations (X^T X) c = X^T y over a small basis. The
exponential model is fitted on ln(y) and scored on the original y.
"""
import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import scipy.linalg

from motion_tracking.data_structures import ModelType, RegressionResult, SeriesPoint

logger = logging.getLogger(__name__)

Basis = List[Callable[[np.ndarray], np.ndarray]]


def _inverse_square(x: np.ndarray) -> np.ndarray:
    with np.errstate(divide='ignore'):
        return 1.0 / (x * x)


_BASES: Dict[ModelType, Basis] = {
    ModelType.LINEAR: [np.ones_like, lambda x: x],
    ModelType.QUADRATIC: [np.ones_like, lambda x: x, lambda x: x ** 2],
    ModelType.CUBIC: [np.ones_like, lambda x: x, lambda x: x ** 2, lambda x: x ** 3],
    ModelType.SQUARE_ROOT: [np.ones_like, np.sqrt],
    ModelType.INVERSE_SQUARE: [np.ones_like, _inverse_square],
    ModelType.EXPONENTIAL: [np.ones_like, lambda x: x],  # on ln(y)
}


def resolve_model_type(model_type: Union[str, ModelType]) -> ModelType:
    """Accept a ModelType or its string value."""
    if isinstance(model_type, ModelType):
        return model_type
    try:
        return ModelType(model_type)
    except ValueError:
        valid = ", ".join(m.value for m in ModelType)
        raise ValueError(f"Unknown model type {model_type!r}, expected one of: {valid}") from None


def unknowns(model_type: Union[str, ModelType]) -> int:
    """Number of coefficients of a model family."""
    return len(_BASES[resolve_model_type(model_type)])


def _domain_error(model_type: ModelType, x: np.ndarray, y: np.ndarray) -> Optional[str]:
    if model_type == ModelType.SQUARE_ROOT and np.any(x < 0):
        return "negative x"
    if model_type == ModelType.INVERSE_SQUARE and np.any(x == 0):
        return "zero x"
    if model_type == ModelType.EXPONENTIAL and np.any(y <= 0):
        return "non-positive y"
    return None


def design_matrix(x: np.ndarray, basis: Basis) -> np.ndarray:
    """Stack basis functions of x as columns."""
    x = np.asarray(x, dtype=float)
    return np.column_stack([fn(x) for fn in basis])


def solve_normal_equations(design: np.ndarray, y: np.ndarray) -> Optional[np.ndarray]:
    """
    Solve the least-squares normal equations for `design @ c ~= y`.

    Columns are equilibrated to unit max-norm before forming X^T X, which keeps
    polynomial fits over large x well conditioned.

    Returns:
        Coefficient vector, or None when the system is rank deficient
    """
    col_scale = np.max(np.abs(design), axis=0)
    col_scale[col_scale == 0] = 1.0
    scaled = design / col_scale
    if np.linalg.matrix_rank(scaled) < design.shape[1]:
        return None

    normal = scaled.T @ scaled
    rhs = scaled.T @ y
    try:
        solution = scipy.linalg.solve(normal, rhs, assume_a='pos')
    except (np.linalg.LinAlgError, ValueError) as e:
        logger.debug("Normal equations could not be solved: %s", e)
        return None
    return solution / col_scale


def r_squared(observed: np.ndarray, predicted: np.ndarray) -> Optional[float]:
    """
    Coefficient of determination.

    Returns:
        1 - SS_res / SS_tot, or None when the observed values have no variance
    """
    observed = np.asarray(observed, dtype=float)
    ss_tot = float(np.sum((observed - observed.mean()) ** 2))
    if ss_tot == 0.0:
        return None
    ss_res = float(np.sum((observed - predicted) ** 2))
    return 1.0 - ss_res / ss_tot


def _format_number(value: float) -> str:
    # +0.0 turns -0.0 into 0.0
    return np.format_float_positional(round(float(value), 5) + 0.0, trim='-')


def _terms(coefficients: Sequence[float], suffixes: Sequence[str]) -> str:
    text = _format_number(coefficients[0])
    for value, suffix in zip(coefficients[1:], suffixes):
        number = _format_number(value)
        if number.startswith('-'):
            text += f" - {number[1:]}{suffix}"
        else:
            text += f" + {number}{suffix}"
    return text


def format_equation(model_type: Union[str, ModelType], coefficients: Sequence[float]) -> str:
    """
    Render a fitted model as a display string, coefficients rounded to 5 decimals.

    Example:
        >>> format_equation('linear', [2.0, -0.5])
        'y = 2 - 0.5x'
    """
    model_type = resolve_model_type(model_type)
    if model_type == ModelType.LINEAR:
        return "y = " + _terms(coefficients, ['x'])
    if model_type == ModelType.QUADRATIC:
        return "y = " + _terms(coefficients, ['x', 'x²'])
    if model_type == ModelType.CUBIC:
        return "y = " + _terms(coefficients, ['x', 'x²', 'x³'])
    if model_type == ModelType.SQUARE_ROOT:
        return "y = " + _terms(coefficients, ['√x'])
    if model_type == ModelType.INVERSE_SQUARE:
        return "y = " + _terms(coefficients, ['/x²'])
    c = [_format_number(v) for v in coefficients]
    return f"y = {c[0]}·e^({c[1]}x)"


def make_predictor(model_type: Union[str, ModelType],
                   coefficients: Sequence[float]) -> Callable:
    """
    Build `predict(x)` for fitted coefficients.

    The returned function maps a float to a float and an array to an array.
    """
    model_type = resolve_model_type(model_type)
    coefficients = [float(v) for v in coefficients]
    basis = _BASES[model_type]

    def predict(x):
        x_arr = np.asarray(x, dtype=float)
        if model_type == ModelType.EXPONENTIAL:
            y = coefficients[0] * np.exp(coefficients[1] * x_arr)
        else:
            y = sum(c * fn(x_arr) for c, fn in zip(coefficients, basis))
        return float(y) if np.ndim(y) == 0 else y

    return predict


def fit(points: Sequence[Tuple[float, float]],
        model_type: Union[str, ModelType]) -> Optional[RegressionResult]:
    """
    Fit a model family to (x, y) points by ordinary least squares.

    Args:
        points: Sequence of (x, y) pairs
        model_type: ModelType or its string value

    Returns:
        RegressionResult, or None when there are fewer distinct points than
        unknowns, a point violates the model's domain, any value is not
        finite, or the system is singular

    Raises:
        ValueError: If model_type is not a known model family
    """
    model_type = resolve_model_type(model_type)
    basis = _BASES[model_type]

    data = np.asarray(points, dtype=float).reshape(-1, 2)
    x, y = data[:, 0], data[:, 1]

    if not np.all(np.isfinite(data)):
        logger.debug("%s fit rejected: non-finite values", model_type.value)
        return None
    distinct = len(np.unique(data, axis=0)) if len(data) else 0
    if distinct < len(basis):
        logger.debug("%s fit rejected: %d distinct point(s), need %d",
                     model_type.value, distinct, len(basis))
        return None
    problem = _domain_error(model_type, x, y)
    if problem is not None:
        logger.debug("%s fit rejected: %s", model_type.value, problem)
        return None

    target = np.log(y) if model_type == ModelType.EXPONENTIAL else y
    solution = solve_normal_equations(design_matrix(x, basis), target)
    if solution is None:
        logger.debug("%s fit rejected: singular system", model_type.value)
        return None

    coefficients = [float(v) for v in solution]
    if model_type == ModelType.EXPONENTIAL:
        coefficients[0] = float(np.exp(coefficients[0]))

    predict = make_predictor(model_type, coefficients)
    return RegressionResult(
        model_type=model_type,
        coefficients=coefficients,
        r2=r_squared(y, predict(x)),
        equation=format_equation(model_type, coefficients),
        predict=predict,
    )


def fit_series(series: Sequence[SeriesPoint],
               model_type: Union[str, ModelType]) -> Optional[RegressionResult]:
    """Fit a model with time as x and the series value as y."""
    return fit([(p.time, p.value) for p in series], model_type)


def sample_fit_curve(result: RegressionResult,
                     t_min: float,
                     t_max: float,
                     num_points: int = 100) -> Tuple[np.ndarray, np.ndarray]:
    """
    Evenly sample a fitted model for drawing a smooth curve.

    Returns:
        Tuple of (xs, ys); a single point when t_min == t_max
    """
    if t_min == t_max:
        xs = np.array([t_min], dtype=float)
    else:
        xs = np.linspace(t_min, t_max, num_points)
    with np.errstate(divide='ignore', invalid='ignore'):
        ys = np.asarray(result.predict(xs), dtype=float)
    return xs, ys
