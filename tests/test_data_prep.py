import numpy as np
import pandas as pd
import pytest

from statlearn import (
    add_bias,
    load_iris_subset,
    load_regression_dataset,
    make_train_test_split,
    standardize,
)


def test_default_subset_is_setosa_vs_versicolor():
    X, y, meta = load_iris_subset()

    assert X.shape == (100, 2)
    assert list(X.columns) == ["sepal length (cm)", "sepal width (cm)"]
    assert y.sum() == 50
    assert meta["positive_class"] == "versicolor"
    assert meta["positive_rate"] == pytest.approx(0.5)
    # setosa rows come first in the Iris table
    assert y.iloc[0] == 0 and y.iloc[-1] == 1


def test_n_per_class_keeps_first_rows():
    X, y, meta = load_iris_subset(n_per_class=15)

    assert len(X) == 30
    assert y.sum() == 15
    assert meta["num_samples"] == 30
    full_X, _, _ = load_iris_subset()
    pd.testing.assert_frame_equal(X.iloc[:15], full_X.iloc[:15])


def test_positive_class_override():
    _, y, meta = load_iris_subset(positive_class="setosa")

    assert meta["positive_class"] == "setosa"
    assert y.iloc[0] == 1 and y.iloc[-1] == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"classes": ("setosa", "tulip")},
        {"classes": ("setosa", "setosa")},
        {"classes": ("setosa",)},
        {"features": ("sepal length (cm)", "stem height")},
        {"positive_class": "virginica"},
        {"n_per_class": 0},
    ],
)
def test_bad_subset_arguments(kwargs):
    with pytest.raises(ValueError):
        load_iris_subset(**kwargs)


def test_sparse_regression_dataset():
    X, y, meta = load_regression_dataset("sparse", n_samples=60, n_features=8, n_informative=2)

    assert X.shape == (60, 8)
    assert len(y) == 60
    assert np.count_nonzero(meta["true_coef"]) == 2


def test_diabetes_dataset():
    X, y, meta = load_regression_dataset("diabetes")

    assert X.shape == (442, 10)
    assert meta["true_coef"] is None


def test_unknown_regression_dataset():
    with pytest.raises(ValueError):
        load_regression_dataset("prostate")


def test_add_bias_prepends_ones():
    X_bias = add_bias([[2.0, 3.0], [4.0, 5.0]])

    np.testing.assert_array_equal(X_bias, [[1.0, 2.0, 3.0], [1.0, 4.0, 5.0]])


def test_standardize_handles_constant_column():
    X = np.array([[1.0, 5.0], [3.0, 5.0], [5.0, 5.0]])
    X_scaled, mean, std = standardize(X)

    np.testing.assert_allclose(mean, [3.0, 5.0])
    np.testing.assert_allclose(std, [np.sqrt(8.0 / 3.0), 1.0])
    np.testing.assert_allclose(X_scaled[:, 1], 0.0)
    np.testing.assert_allclose(X_scaled[:, 0].std(), 1.0)


def test_train_test_split_is_stratified(iris_sepal):
    X, y = iris_sepal
    train_ids, test_ids = make_train_test_split(X, y, test_size=0.2, random_state=0)

    assert len(train_ids) == 80 and len(test_ids) == 20
    assert y.loc[test_ids].sum() == 10
    assert set(train_ids).isdisjoint(test_ids)


def test_train_test_split_rejects_bad_size(iris_sepal):
    X, y = iris_sepal
    with pytest.raises(ValueError):
        make_train_test_split(X, y, test_size=1.5)
