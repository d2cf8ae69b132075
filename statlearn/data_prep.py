from __future__ import annotations

"""
Data preparation utilities: the two-class Iris subset used for logistic
regression and the regression problems used to introduce the lasso.
"""

from typing import Sequence

import numpy as np
import pandas as pd
from sklearn.datasets import load_diabetes, load_iris, make_regression
from sklearn.model_selection import train_test_split

from .constants import DEFAULT_CLASSES, DEFAULT_FEATURES, IRIS_CLASSES, IRIS_FEATURES


def load_iris_subset(
    classes: Sequence[str] = DEFAULT_CLASSES,
    features: Sequence[str] = DEFAULT_FEATURES,
    n_per_class: int | None = None,
    positive_class: str | None = None,
):
    """
    Build a binary problem from two Iris species and a handful of features.

    The label is 1 for ``positive_class`` (defaults to the second class) and 0
    for the other one. ``n_per_class`` keeps the first n rows of each species.
    """
    classes = tuple(classes)
    features = list(features)
    if len(classes) != 2 or classes[0] == classes[1]:
        raise ValueError(f"Expected two distinct classes, got {classes}")
    unknown = [c for c in classes if c not in IRIS_CLASSES]
    if unknown:
        raise ValueError(f"Unknown Iris classes: {unknown}")
    unknown = [f for f in features if f not in IRIS_FEATURES]
    if unknown:
        raise ValueError(f"Unknown Iris features: {unknown}")
    if positive_class is None:
        positive_class = classes[1]
    elif positive_class not in classes:
        raise ValueError(f"positive_class must be one of {classes}")
    if n_per_class is not None and n_per_class < 1:
        raise ValueError("n_per_class must be a positive integer")

    iris = load_iris(as_frame=True)
    df = iris.frame.copy()
    df["species"] = np.asarray(iris.target_names)[iris.target]
    df = df[df["species"].isin(classes)]

    if n_per_class is not None:
        df = df.groupby("species", sort=False).head(n_per_class)

    X = df[features].reset_index(drop=True)
    y = (df["species"] == positive_class).astype(int).reset_index(drop=True)
    y.name = "target"

    meta = {
        "num_samples": len(X),
        "classes": classes,
        "positive_class": positive_class,
        "positive_rate": float(y.mean()),
        "feature_count": X.shape[1],
        "features": features,
    }
    return X, y, meta


def load_regression_dataset(
    name: str = "diabetes",
    n_samples: int = 100,
    n_features: int = 10,
    n_informative: int = 3,
    noise: float = 1.0,
    random_state: int | None = 0,
):
    """
    Regression data for the lasso examples.

    ``diabetes`` is the built-in scikit-learn dataset; ``sparse`` draws a
    synthetic problem where only ``n_informative`` coefficients are non-zero.
    """
    if name == "diabetes":
        data = load_diabetes(as_frame=True)
        X = data.data.copy()
        y = data.target.copy()
        true_coef = None
    elif name == "sparse":
        X_arr, y_arr, true_coef = make_regression(
            n_samples=n_samples,
            n_features=n_features,
            n_informative=n_informative,
            noise=noise,
            coef=True,
            random_state=random_state,
        )
        X = pd.DataFrame(X_arr, columns=[f"x{j}" for j in range(n_features)])
        y = pd.Series(y_arr, name="target")
        true_coef = pd.Series(true_coef, index=X.columns)
    else:
        raise ValueError(f"Unknown regression dataset: {name}")

    meta = {
        "name": name,
        "num_samples": len(X),
        "feature_count": X.shape[1],
        "true_coef": true_coef,
    }
    return X, y, meta


def add_bias(X) -> np.ndarray:
    X = np.asarray(X, dtype=float)
    return np.hstack([np.ones((X.shape[0], 1)), X])


def standardize(X):
    """Center and scale columns; zero-variance columns keep a unit scale."""
    X = np.asarray(X, dtype=float)
    mean = X.mean(axis=0)
    std = X.std(axis=0)
    std[std == 0] = 1.0
    return (X - mean) / std, mean, std


def make_train_test_split(
    X: pd.DataFrame,
    y: pd.Series,
    test_size: float = 0.2,
    random_state: int | None = 42,
    stratify: bool = True,
):
    """Random row-level split, stratified on the label by default."""
    if not 0.0 < test_size < 1.0:
        raise ValueError(f"test_size must be in (0, 1), got {test_size}")
    train_ids, test_ids = train_test_split(
        X.index,
        test_size=test_size,
        random_state=random_state,
        stratify=y if stratify else None,
    )
    return train_ids, test_ids
