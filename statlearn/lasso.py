from __future__ import annotations

"""
The lasso by cyclic coordinate descent, its regularization path, and the
L1-bound form of the same problem.

The penalized objective is the one scikit-learn uses:

    (1 / 2n) * ||y - X b - b0||^2 + alpha * ||b||_1

with an unpenalized intercept b0. Predictors are standardized by default so
the penalty treats every column on the same scale.
"""

from dataclasses import dataclass, field
import warnings

import numpy as np
from sklearn.exceptions import ConvergenceWarning

from .constants import LASSO_ALPHA, LASSO_N_ALPHAS, TOLERANCE
from .data_prep import standardize as standardize_columns


def soft_threshold(z, gamma: float):
    """S(z, gamma) = sign(z) * max(|z| - gamma, 0), elementwise."""
    z = np.asarray(z, dtype=float)
    return np.sign(z) * np.maximum(np.abs(z) - gamma, 0.0)


def lasso_objective(coef: np.ndarray, intercept: float, X, y, alpha: float) -> float:
    X = np.asarray(X, dtype=float)
    y = np.asarray(y, dtype=float)
    resid = y - X @ coef - intercept
    return float(0.5 * np.mean(resid**2) + alpha * np.sum(np.abs(coef)))


def _prepare(X, y, fit_intercept: bool, standardize: bool):
    X = np.asarray(X, dtype=float)
    y = np.asarray(y, dtype=float).ravel()
    if X.ndim != 2:
        raise ValueError(f"Expected a 2-D feature matrix, got shape {X.shape}")
    if len(y) != X.shape[0]:
        raise ValueError("X and y have a different number of rows.")

    if standardize:
        Xs, x_mean, x_scale = standardize_columns(X)
        if not fit_intercept:
            # scale only; centering would smuggle an intercept back in
            x_mean = np.zeros(X.shape[1])
            Xs = X / x_scale
    elif fit_intercept:
        x_mean = X.mean(axis=0)
        x_scale = np.ones(X.shape[1])
        Xs = X - x_mean
    else:
        x_mean = np.zeros(X.shape[1])
        x_scale = np.ones(X.shape[1])
        Xs = X

    y_mean = float(y.mean()) if fit_intercept else 0.0
    return Xs, y - y_mean, x_mean, x_scale, y_mean


def alpha_max(X, y, fit_intercept: bool = True, standardize: bool = True) -> float:
    """Smallest alpha at which every lasso coefficient is exactly zero."""
    Xs, yc, *_ = _prepare(X, y, fit_intercept, standardize)
    # column by column, exactly as the first coordinate descent sweep computes it
    corr = [abs(Xs[:, j] @ yc) for j in range(Xs.shape[1])]
    return float(max(corr) / Xs.shape[0])


def ols_coefficients(X, y, fit_intercept: bool = True, standardize: bool = True) -> np.ndarray:
    """
    Least squares coefficients on the same (standardized, centered) scale the
    lasso path works on. Minimum-norm solution when X is rank deficient.
    """
    Xs, yc, *_ = _prepare(X, y, fit_intercept, standardize)
    coef, *_ = np.linalg.lstsq(Xs, yc, rcond=None)
    return coef


class Lasso:
    """
    Lasso regression fitted by cyclic coordinate descent.

    Each sweep updates one coefficient at a time against the running residual:

        rho_j = x_j^T (r + x_j b_j) / n
        b_j  <- S(rho_j, alpha) / (x_j^T x_j / n)

    and stops once the largest coefficient change in a sweep is below ``tol``.
    ``coef_`` and ``intercept_`` are reported in the original units;
    ``coef_std_`` keeps the coefficients on the standardized scale.
    """

    def __init__(
        self,
        alpha: float = LASSO_ALPHA,
        max_iter: int = 10000,
        tol: float = TOLERANCE,
        fit_intercept: bool = True,
        standardize: bool = True,
        verbose: bool = False,
    ):
        if not np.isfinite(alpha) or alpha < 0:
            raise ValueError(f"alpha must be a finite non-negative number, got {alpha}")
        self.alpha = alpha
        self.max_iter = max_iter
        self.tol = tol
        self.fit_intercept = fit_intercept
        self.standardize = standardize
        self.verbose = verbose
        self.coef_: np.ndarray | None = None
        self.coef_std_: np.ndarray | None = None
        self.intercept_: float = 0.0
        self.n_iter_: int = 0
        self.converged_: bool = False
        self.objective_history_: list[float] = []

    def fit(self, X, y, coef_init: np.ndarray | None = None):
        """
        Run coordinate descent. ``coef_init`` (standardized scale) warm-starts
        the sweep, which is how ``lasso_path`` walks down the alpha grid.
        """
        Xs, yc, self.x_mean_, self.x_scale_, self.y_mean_ = _prepare(
            X, y, self.fit_intercept, self.standardize
        )
        n, p = Xs.shape
        col_sq = np.sum(Xs**2, axis=0) / n

        beta = np.zeros(p) if coef_init is None else np.array(coef_init, dtype=float)
        if beta.shape != (p,):
            raise ValueError(f"coef_init must have shape ({p},), got {beta.shape}")
        resid = yc - Xs @ beta

        self.objective_history_ = []
        self.converged_ = False
        self.n_iter_ = 0

        for sweep in range(1, self.max_iter + 1):
            max_change = 0.0
            for j in range(p):
                if col_sq[j] == 0.0:
                    continue
                old = beta[j]
                rho = Xs[:, j] @ resid / n + col_sq[j] * old
                new = float(soft_threshold(rho, self.alpha)) / col_sq[j]
                if new != old:
                    resid -= Xs[:, j] * (new - old)
                    beta[j] = new
                    max_change = max(max_change, abs(new - old))

            self.n_iter_ = sweep
            objective = 0.5 * np.mean(resid**2) + self.alpha * np.sum(np.abs(beta))
            self.objective_history_.append(float(objective))

            if self.verbose and sweep % 100 == 0:
                print(f"[Lasso] sweep={sweep}, objective={objective:.6f}, max_change={max_change:.2e}")

            if max_change < self.tol:
                self.converged_ = True
                break

        if not self.converged_:
            warnings.warn(
                f"Lasso did not converge in {self.max_iter} sweeps (alpha={self.alpha}).",
                ConvergenceWarning,
            )

        self.coef_std_ = beta
        self.coef_ = beta / self.x_scale_
        self.intercept_ = float(self.y_mean_ - np.sum(self.coef_ * self.x_mean_))
        return self

    def predict(self, X) -> np.ndarray:
        if self.coef_ is None:
            raise RuntimeError("Model is not fitted.")
        return np.asarray(X, dtype=float) @ self.coef_ + self.intercept_

    @property
    def n_nonzero_(self) -> int:
        if self.coef_ is None:
            raise RuntimeError("Model is not fitted.")
        return int(np.count_nonzero(self.coef_))


@dataclass
class LassoPath:
    """Coefficient profiles along a decreasing alpha grid."""

    alphas: np.ndarray
    coefs: np.ndarray  # shape [n_alphas, n_features], standardized scale
    l1_norms: np.ndarray
    shrinkage: np.ndarray
    feature_names: list[str] = field(default_factory=list)
    n_iters: list[int] = field(default_factory=list)


def lasso_path(
    X,
    y,
    n_alphas: int = LASSO_N_ALPHAS,
    eps: float = 1e-3,
    alphas=None,
    max_iter: int = 10000,
    tol: float = TOLERANCE,
    standardize: bool = True,
) -> LassoPath:
    """
    Fit the lasso over a log-spaced alpha grid from ``alpha_max`` down to
    ``eps * alpha_max``, warm-starting each fit from the previous one.

    ``shrinkage`` is s = ||b(alpha)||_1 / ||b_ols||_1, the usual x-axis of a
    lasso profile plot.
    """
    feature_names = list(X.columns) if hasattr(X, "columns") else []
    X_arr = np.asarray(X, dtype=float)
    y_arr = np.asarray(y, dtype=float).ravel()

    if alphas is None:
        top = alpha_max(X_arr, y_arr, standardize=standardize)
        if top == 0.0:
            raise ValueError("alpha_max is zero (constant target or constant features); no path to trace.")
        alphas = np.logspace(np.log10(top), np.log10(top * eps), n_alphas)
        alphas[0] = top
    else:
        alphas = np.sort(np.asarray(alphas, dtype=float))[::-1]

    coefs = np.zeros((len(alphas), X_arr.shape[1]))
    n_iters = []
    warm = None
    for i, alpha in enumerate(alphas):
        model = Lasso(alpha=alpha, max_iter=max_iter, tol=tol, standardize=standardize)
        model.fit(X_arr, y_arr, coef_init=warm)
        warm = model.coef_std_
        coefs[i] = model.coef_std_
        n_iters.append(model.n_iter_)

    l1_norms = np.sum(np.abs(coefs), axis=1)
    ols_norm = np.sum(np.abs(ols_coefficients(X_arr, y_arr, standardize=standardize)))
    shrinkage = l1_norms / ols_norm if ols_norm > 0 else np.zeros_like(l1_norms)

    return LassoPath(
        alphas=alphas,
        coefs=coefs,
        l1_norms=l1_norms,
        shrinkage=shrinkage,
        feature_names=feature_names,
        n_iters=n_iters,
    )


def lasso_constrained(
    X,
    y,
    bound: float,
    tol: float = 1e-6,
    max_bisect: int = 100,
    max_iter: int = 10000,
    standardize: bool = True,
) -> tuple[np.ndarray, float]:
    """
    Solve the bound form: minimize ||y - X b||^2 subject to ||b||_1 <= bound.

    Each bound corresponds to a penalty alpha; the L1 norm of the penalized
    solution shrinks as alpha grows, so alpha is found by bisection on
    [0, alpha_max]. Returns the standardized-scale coefficients and the
    matching alpha (0.0 when the bound is loose enough for least squares).
    """
    if bound < 0:
        raise ValueError(f"bound must be non-negative, got {bound}")
    X_arr = np.asarray(X, dtype=float)
    y_arr = np.asarray(y, dtype=float).ravel()

    ols = ols_coefficients(X_arr, y_arr, standardize=standardize)
    if bound >= np.sum(np.abs(ols)):
        return ols, 0.0

    hi = alpha_max(X_arr, y_arr, standardize=standardize)
    if bound == 0:
        return np.zeros(X_arr.shape[1]), hi
    lo = 0.0

    best = np.zeros(X_arr.shape[1])
    warm = None
    for _ in range(max_bisect):
        mid = 0.5 * (lo + hi)
        model = Lasso(alpha=mid, max_iter=max_iter, tol=tol * 1e-2, standardize=standardize)
        model.fit(X_arr, y_arr, coef_init=warm)
        warm = model.coef_std_
        norm = np.sum(np.abs(model.coef_std_))
        if norm > bound:
            lo = mid
        else:
            hi = mid
            best = model.coef_std_
            if bound - norm < tol * max(1.0, bound):
                break
    return best, hi
