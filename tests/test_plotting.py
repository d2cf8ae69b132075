import matplotlib.figure
import numpy as np
import pytest

from statlearn import LogisticRegressionIRLS, lasso_path
from statlearn.plotting import (
    plot_confusion_matrix_and_roc,
    plot_decision_boundary,
    plot_lasso_path,
    plot_loss_history,
)


@pytest.fixture
def fitted(iris_overlapping):
    X, y = iris_overlapping
    return X, y, LogisticRegressionIRLS().fit(X.values, y.values)


def test_decision_boundary_figure(fitted, tmp_path):
    X, y, model = fitted
    target = tmp_path / "boundary.png"
    fig = plot_decision_boundary(X, y, {"IRLS": model}, class_names=("versicolor", "virginica"), filename=target)

    assert isinstance(fig, matplotlib.figure.Figure)
    assert target.exists()
    ax = fig.axes[0]
    assert ax.get_xlabel() == "sepal length (cm)"
    assert len(ax.get_lines()) == 1


def test_decision_boundary_needs_two_features(iris_overlapping):
    X, y = iris_overlapping
    with pytest.raises(ValueError):
        plot_decision_boundary(X.assign(extra=1.0), y, {})


def test_loss_history_figure(fitted):
    _, _, model = fitted
    fig = plot_loss_history({"IRLS": model.loss_history_, "flat": [0.5, 0.5, 0.5]})

    assert len(fig.axes[0].get_lines()) == 2


def test_confusion_and_roc_figure(fitted, tmp_path):
    X, y, model = fitted
    target = tmp_path / "roc.png"
    fig = plot_confusion_matrix_and_roc(y, model.predict_proba(X.values), title="(IRLS)", filename=target)

    assert len(fig.axes) >= 2
    assert target.exists()


@pytest.mark.parametrize("x_axis", ["shrinkage", "log_alpha"])
def test_lasso_path_figure(sparse_problem, x_axis):
    X, y, _ = sparse_problem
    path = lasso_path(X, y, n_alphas=10)
    fig = plot_lasso_path(path, x_axis=x_axis)

    # one profile per feature plus the zero line
    assert len(fig.axes[0].get_lines()) == X.shape[1] + 1


def test_lasso_path_rejects_unknown_axis(sparse_problem):
    X, y, _ = sparse_problem
    path = lasso_path(X.values, y.values, n_alphas=5)
    with pytest.raises(ValueError):
        plot_lasso_path(path, x_axis="l2")
    assert np.all(np.isfinite(path.coefs))
