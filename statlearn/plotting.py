from __future__ import annotations

"""
Figures for the worked examples: decision boundaries on the two-feature Iris
subset, loss curves, ROC / confusion matrix, and lasso coefficient profiles.

Every helper returns the matplotlib Figure and, when ``filename`` is given,
also saves it and closes it.
"""

from typing import Mapping

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from sklearn.metrics import ConfusionMatrixDisplay, auc, confusion_matrix, roc_curve

from .lasso import LassoPath
from .logreg import decision_boundary


def _finish(fig, filename):
    fig.tight_layout()
    if filename:
        fig.savefig(filename)
        plt.close(fig)
    return fig


def plot_decision_boundary(
    X: pd.DataFrame,
    y: pd.Series,
    models: Mapping[str, object],
    class_names: tuple[str, str] = ("class 0", "class 1"),
    title: str = "Logistic regression decision boundary",
    filename=None,
):
    """Scatter both classes and draw one separating line per fitted model."""
    X_arr = np.asarray(X, dtype=float)
    y_arr = np.asarray(y)
    if X_arr.shape[1] != 2:
        raise ValueError("Decision boundaries are only drawn for two features.")

    fig, ax = plt.subplots(figsize=(8, 6))
    for label, marker, name in ((0, "o", class_names[0]), (1, "s", class_names[1])):
        mask = y_arr == label
        ax.scatter(X_arr[mask, 0], X_arr[mask, 1], marker=marker, label=name, alpha=0.8)

    pad = 0.5
    x_min, x_max = X_arr[:, 0].min() - pad, X_arr[:, 0].max() + pad
    y_min, y_max = X_arr[:, 1].min() - pad, X_arr[:, 1].max() + pad
    xs = np.linspace(x_min, x_max, 200)
    for name, model in models.items():
        ax.plot(xs, decision_boundary(model.coef_, model.intercept_, xs), lw=2, label=name)

    ax.set_xlim(x_min, x_max)
    ax.set_ylim(y_min, y_max)
    if isinstance(X, pd.DataFrame):
        ax.set_xlabel(X.columns[0])
        ax.set_ylabel(X.columns[1])
    ax.set_title(title)
    ax.legend(loc="best")
    ax.grid(True)
    return _finish(fig, filename)


def plot_loss_history(
    histories: Mapping[str, list[float]],
    title: str = "Cross-entropy loss per iteration",
    log_x: bool = True,
    filename=None,
):
    fig, ax = plt.subplots(figsize=(8, 5))
    for name, history in histories.items():
        steps = np.arange(1, len(history) + 1)
        ax.plot(steps, history, lw=2, label=name)
    if log_x:
        ax.set_xscale("log")
    ax.set_xlabel("Iteration")
    ax.set_ylabel("Loss")
    ax.set_title(title)
    ax.legend()
    ax.grid(True)
    return _finish(fig, filename)


def plot_confusion_matrix_and_roc(y_true, probs, threshold: float = 0.5, title: str = "", filename=None):
    """Confusion matrix and ROC curve side by side."""
    preds = (np.asarray(probs) >= threshold).astype(int)
    fig, (ax_cm, ax_roc) = plt.subplots(1, 2, figsize=(12, 5))

    cm = confusion_matrix(y_true, preds, labels=[0, 1])
    ConfusionMatrixDisplay(confusion_matrix=cm).plot(ax=ax_cm, cmap="Blues", values_format="d", colorbar=False)
    ax_cm.set_title(f"Confusion Matrix {title}".strip())

    fpr, tpr, _ = roc_curve(y_true, probs)
    roc_auc = auc(fpr, tpr)
    ax_roc.plot(fpr, tpr, color="darkorange", lw=2, label=f"ROC curve (area = {roc_auc:.3f})")
    ax_roc.plot([0, 1], [0, 1], color="navy", lw=2, linestyle="--")
    ax_roc.set_xlim([0.0, 1.0])
    ax_roc.set_ylim([0.0, 1.05])
    ax_roc.set_xlabel("False Positive Rate")
    ax_roc.set_ylabel("True Positive Rate")
    ax_roc.set_title(f"ROC Curve {title}".strip())
    ax_roc.legend(loc="lower right")
    ax_roc.grid(True)
    return _finish(fig, filename)


def plot_lasso_path(
    path: LassoPath,
    x_axis: str = "shrinkage",
    title: str = "Lasso coefficient profiles",
    filename=None,
):
    """
    Coefficient profiles against the shrinkage factor s (0 -> all zero,
    1 -> least squares) or against log10(alpha).
    """
    if x_axis == "shrinkage":
        xs, xlabel = path.shrinkage, "Shrinkage factor s"
    elif x_axis == "log_alpha":
        xs, xlabel = np.log10(path.alphas), "log10(alpha)"
    else:
        raise ValueError(f"Unknown x_axis: {x_axis}")

    names = path.feature_names or [f"x{j}" for j in range(path.coefs.shape[1])]
    fig, ax = plt.subplots(figsize=(9, 6))
    for j, name in enumerate(names):
        ax.plot(xs, path.coefs[:, j], lw=2, label=name)
    ax.axhline(0.0, color="grey", lw=1, linestyle="--")
    if x_axis == "log_alpha":
        ax.invert_xaxis()
    ax.set_xlabel(xlabel)
    ax.set_ylabel("Coefficient (standardized)")
    ax.set_title(title)
    ax.legend(loc="best", fontsize="small")
    ax.grid(True)
    return _finish(fig, filename)
