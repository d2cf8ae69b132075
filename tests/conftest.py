import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from statlearn import load_iris_subset, load_regression_dataset


@pytest.fixture(autouse=True)
def close_figures():
    yield
    import matplotlib.pyplot as plt

    plt.close("all")


@pytest.fixture
def iris_sepal():
    """Setosa vs Versicolor on the sepal features: separable, with one setosa close to the versicolors."""
    X, y, _ = load_iris_subset()
    return X, y


@pytest.fixture
def iris_separable():
    X, y, _ = load_iris_subset(features=("sepal length (cm)", "petal length (cm)"))
    return X, y


@pytest.fixture
def iris_overlapping():
    """Versicolor vs Virginica on the sepal features: heavy overlap, finite MLE."""
    X, y, _ = load_iris_subset(classes=("versicolor", "virginica"))
    return X, y


@pytest.fixture
def diabetes():
    X, y, _ = load_regression_dataset("diabetes")
    return X, y


@pytest.fixture
def sparse_problem():
    """Three active predictors out of ten, independent Gaussian columns."""
    rng = np.random.default_rng(7)
    n, p = 200, 10
    X = rng.normal(size=(n, p))
    coef = np.zeros(p)
    coef[[0, 3, 6]] = [3.0, -2.0, 1.5]
    y = 4.0 + X @ coef + 0.5 * rng.normal(size=n)
    columns = [f"x{j}" for j in range(p)]
    return pd.DataFrame(X, columns=columns), pd.Series(y, name="target"), coef
