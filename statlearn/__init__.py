"""
Classic statistical learning from first principles.

This package contains data preparation helpers for the Iris and lasso
examples, logistic regression trained by gradient descent and by IRLS, the
lasso by coordinate descent, evaluation utilities and plots used by main.py.
"""

from .constants import DEFAULT_CLASSES, DEFAULT_FEATURES, IRIS_CLASSES, IRIS_FEATURES
from .data_prep import (
    add_bias,
    load_iris_subset,
    load_regression_dataset,
    make_train_test_split,
    standardize,
)
from .lasso import (
    Lasso,
    LassoPath,
    alpha_max,
    lasso_constrained,
    lasso_path,
    ols_coefficients,
    soft_threshold,
)
from .logreg import (
    LogisticRegressionGD,
    LogisticRegressionIRLS,
    cross_entropy_loss,
    decision_boundary,
    sigmoid,
)
from .metrics import (
    compute_classification_metrics,
    compute_regression_metrics,
    summarize_coefficients,
)

__all__ = [
    "DEFAULT_CLASSES",
    "DEFAULT_FEATURES",
    "IRIS_CLASSES",
    "IRIS_FEATURES",
    "add_bias",
    "load_iris_subset",
    "load_regression_dataset",
    "make_train_test_split",
    "standardize",
    "Lasso",
    "LassoPath",
    "alpha_max",
    "lasso_constrained",
    "lasso_path",
    "ols_coefficients",
    "soft_threshold",
    "LogisticRegressionGD",
    "LogisticRegressionIRLS",
    "cross_entropy_loss",
    "decision_boundary",
    "sigmoid",
    "compute_classification_metrics",
    "compute_regression_metrics",
    "summarize_coefficients",
]
