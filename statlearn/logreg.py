from __future__ import annotations

"""
Logistic regression from first principles: the cross-entropy objective, its
derivatives, and two estimators built on them (batch gradient descent and
Newton-Raphson written as iteratively reweighted least squares).

All weight vectors carry the intercept in position 0 and are paired with a
design matrix that already has the bias column (see ``data_prep.add_bias``).
"""

import warnings

import numpy as np
from sklearn.exceptions import ConvergenceWarning

from .constants import GD_LEARNING_RATE, GD_MAX_ITER, IRLS_MAX_ITER, IRLS_RIDGE, TOLERANCE
from .data_prep import add_bias, standardize as standardize_columns

_EPS = 1e-12


def sigmoid(z):
    z = np.clip(z, -500, 500)
    return 1.0 / (1.0 + np.exp(-z))


def _penalty_mask(n_weights: int) -> np.ndarray:
    mask = np.ones(n_weights)
    mask[0] = 0.0
    return mask


def cross_entropy_loss(w: np.ndarray, X: np.ndarray, y: np.ndarray, l2: float = 0.0) -> float:
    """
    Mean negative log-likelihood of a Bernoulli model with p = sigmoid(Xw).

    The optional L2 term (l2 / 2) * ||w[1:]||^2 leaves the intercept alone.
    """
    p = sigmoid(X @ w)
    loss = -np.mean(y * np.log(p + _EPS) + (1 - y) * np.log(1 - p + _EPS))
    if l2:
        loss += 0.5 * l2 * np.sum(w[1:] ** 2)
    return float(loss)


def cross_entropy_gradient(w: np.ndarray, X: np.ndarray, y: np.ndarray, l2: float = 0.0) -> np.ndarray:
    """Gradient X^T (p - y) / n of the mean cross-entropy."""
    p = sigmoid(X @ w)
    grad = X.T @ (p - y) / len(y)
    if l2:
        grad += l2 * _penalty_mask(len(w)) * w
    return grad


def cross_entropy_hessian(w: np.ndarray, X: np.ndarray, l2: float = 0.0) -> np.ndarray:
    """Hessian X^T S X / n with S = diag(p (1 - p))."""
    p = sigmoid(X @ w)
    s = p * (1 - p)
    hess = (X.T * s) @ X / X.shape[0]
    if l2:
        hess += l2 * np.diag(_penalty_mask(len(w)))
    return hess


def newton_step(
    w: np.ndarray,
    X: np.ndarray,
    y: np.ndarray,
    ridge: float = IRLS_RIDGE,
    l2: float = 0.0,
) -> np.ndarray:
    """
    One Newton-Raphson update in IRLS form.

    Solves the weighted least squares system

        (X^T S X + ridge * I) w_new = X^T S z,   z = X w + S^{-1} (y - p)

    where ``ridge`` is a small constant on the diagonal that keeps the system
    solvable when S collapses towards zero (separable data). X^T S z is
    expanded as X^T (S X w + y - p) so S is never inverted.
    """
    eta = X @ w
    p = sigmoid(eta)
    s = p * (1 - p)

    lhs = (X.T * s) @ X
    if l2:
        lhs += len(y) * l2 * np.diag(_penalty_mask(len(w)))
    lhs += ridge * np.eye(len(w))
    rhs = X.T @ (s * eta + (y - p))
    return np.linalg.solve(lhs, rhs)


def decision_boundary(coef, intercept: float, x_values) -> np.ndarray:
    """
    Second-feature coordinates of the line intercept + w1 x1 + w2 x2 = 0.
    """
    coef = np.asarray(coef, dtype=float)
    if coef.shape != (2,):
        raise ValueError("decision_boundary needs exactly two coefficients")
    if coef[1] == 0:
        raise ValueError("Boundary is vertical: the second coefficient is zero")
    x_values = np.asarray(x_values, dtype=float)
    return -(intercept + coef[0] * x_values) / coef[1]


def _check_binary_target(y) -> np.ndarray:
    y_arr = np.asarray(y, dtype=float).ravel()
    if not np.isin(y_arr, (0.0, 1.0)).all():
        raise ValueError("Target must only contain 0/1 labels.")
    return y_arr


class _LogisticRegressionBase:
    """
    Shared plumbing: optional standardization, bias column, back-transform of
    the weights to the original feature units, and prediction.
    """

    label = "logreg"

    def __init__(self, max_iter: int, tol: float, l2: float, standardize: bool, verbose: bool):
        self.max_iter = max_iter
        self.tol = tol
        self.l2 = l2
        self.standardize = standardize
        self.verbose = verbose
        self.weights_: np.ndarray | None = None
        self.coef_: np.ndarray | None = None
        self.intercept_: float | None = None
        self.mean_: np.ndarray | None = None
        self.std_: np.ndarray | None = None
        self.n_iter_: int = 0
        self.converged_: bool = False
        self.loss_history_: list[float] = []

    def _design_matrix(self, X_arr: np.ndarray) -> np.ndarray:
        if self.standardize:
            X_scaled, self.mean_, self.std_ = standardize_columns(X_arr)
        else:
            X_scaled = X_arr
            self.mean_ = np.zeros(X_arr.shape[1])
            self.std_ = np.ones(X_arr.shape[1])
        return add_bias(X_scaled)

    def _run(self, weights: np.ndarray, X_bias: np.ndarray, y_arr: np.ndarray) -> np.ndarray:
        """Solver hook: iterate from ``weights`` and return the final weights."""
        raise NotImplementedError

    def fit(self, X, y):
        X_arr = np.asarray(X, dtype=float)
        if X_arr.ndim != 2:
            raise ValueError(f"Expected a 2-D feature matrix, got shape {X_arr.shape}")
        y_arr = _check_binary_target(y)
        if len(y_arr) != X_arr.shape[0]:
            raise ValueError("X and y have a different number of rows.")

        # a failed refit must not leave the previous model answering predict()
        self.weights_ = None
        self.coef_ = None
        self.intercept_ = None
        self.n_iter_ = 0
        self.converged_ = False
        self.loss_history_ = []

        X_bias = self._design_matrix(X_arr)
        weights = self._run(np.zeros(X_bias.shape[1]), X_bias, y_arr)

        if not self.converged_:
            warnings.warn(
                f"{type(self).__name__} did not converge in {self.max_iter} iterations "
                f"(tol={self.tol}).",
                ConvergenceWarning,
            )

        # Back to original units so both solvers report comparable coefficients
        self.weights_ = weights
        self.coef_ = weights[1:] / self.std_
        self.intercept_ = float(weights[0] - np.sum(self.coef_ * self.mean_))
        return self

    def decision_function(self, X) -> np.ndarray:
        if self.coef_ is None:
            raise RuntimeError("Model is not fitted.")
        X_arr = np.asarray(X, dtype=float)
        return X_arr @ self.coef_ + self.intercept_

    def predict_proba(self, X) -> np.ndarray:
        """Return P(y=1) for each row in X."""
        return sigmoid(self.decision_function(X))

    def predict(self, X, threshold: float = 0.5) -> np.ndarray:
        """Binary predictions using the provided threshold."""
        return (self.predict_proba(X) >= threshold).astype(int)

    def score(self, X, y) -> float:
        """Mean accuracy on (X, y)."""
        return float(np.mean(self.predict(X) == np.asarray(y)))


class LogisticRegressionGD(_LogisticRegressionBase):
    """
    Logistic regression trained with batch gradient descent.
    Features are standardized internally for stability; coef_ and intercept_
    are reported in the original units.
    """

    label = "GD"

    def __init__(
        self,
        lr: float = GD_LEARNING_RATE,
        max_iter: int = GD_MAX_ITER,
        tol: float = TOLERANCE,
        l2: float = 0.0,
        standardize: bool = True,
        verbose: bool = False,
    ):
        super().__init__(max_iter=max_iter, tol=tol, l2=l2, standardize=standardize, verbose=verbose)
        self.lr = lr

    def _run(self, weights, X_bias, y_arr):
        for step in range(1, self.max_iter + 1):
            self.loss_history_.append(cross_entropy_loss(weights, X_bias, y_arr, self.l2))
            grad = cross_entropy_gradient(weights, X_bias, y_arr, self.l2)
            new_weights = weights - self.lr * grad
            delta = np.linalg.norm(new_weights - weights)
            weights = new_weights
            self.n_iter_ = step

            if self.verbose and step % 500 == 0:
                print(f"[GD] step={step}, loss={self.loss_history_[-1]:.4f}")

            if delta < self.tol:
                self.converged_ = True
                break

        self.loss_history_.append(cross_entropy_loss(weights, X_bias, y_arr, self.l2))
        return weights


class LogisticRegressionIRLS(_LogisticRegressionBase):
    """
    Logistic regression trained by Newton-Raphson, i.e. iteratively
    reweighted least squares. Converges in a handful of iterations on
    well-posed data; ``ridge`` is added to the diagonal of X^T S X at every
    step so the linear solve survives near-separable inputs.

    A full Newton step that increases the loss is halved until it does not
    (at most ``max_halvings`` times). Iteration stops when either the step
    norm or the decrease in loss falls below ``tol``; on separable data the
    latter ends the run once every point is classified with near-zero loss.
    """

    label = "IRLS"

    def __init__(
        self,
        max_iter: int = IRLS_MAX_ITER,
        tol: float = TOLERANCE,
        ridge: float = IRLS_RIDGE,
        l2: float = 0.0,
        standardize: bool = False,
        max_halvings: int = 30,
        verbose: bool = False,
    ):
        super().__init__(max_iter=max_iter, tol=tol, l2=l2, standardize=standardize, verbose=verbose)
        self.ridge = ridge
        self.max_halvings = max_halvings

    def _run(self, weights, X_bias, y_arr):
        loss = cross_entropy_loss(weights, X_bias, y_arr, self.l2)
        for it in range(1, self.max_iter + 1):
            self.loss_history_.append(loss)
            new_weights = newton_step(weights, X_bias, y_arr, ridge=self.ridge, l2=self.l2)
            new_loss = cross_entropy_loss(new_weights, X_bias, y_arr, self.l2)

            halvings = 0
            while new_loss > loss and halvings < self.max_halvings:
                new_weights = 0.5 * (weights + new_weights)
                new_loss = cross_entropy_loss(new_weights, X_bias, y_arr, self.l2)
                halvings += 1

            delta = np.linalg.norm(new_weights - weights)
            decrease = loss - new_loss
            weights = new_weights
            loss = new_loss
            self.n_iter_ = it

            if self.verbose:
                print(
                    f"[IRLS] iter={it}, loss={loss:.6f}, step={delta:.2e}, halvings={halvings}"
                )

            if delta < self.tol or abs(decrease) < self.tol:
                self.converged_ = True
                break

        self.loss_history_.append(loss)
        return weights
