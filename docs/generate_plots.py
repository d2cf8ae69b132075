from pathlib import Path

import numpy as np

from statlearn import (
    LogisticRegressionGD,
    LogisticRegressionIRLS,
    lasso_constrained,
    lasso_path,
    ols_coefficients,
    load_iris_subset,
    load_regression_dataset,
)
from statlearn.metrics import misclassification_count
from statlearn.plotting import (
    plot_confusion_matrix_and_roc,
    plot_decision_boundary,
    plot_lasso_path,
    plot_loss_history,
)

# Configuration
OUT_DIR = Path(".")
CLASSES = ("setosa", "versicolor")
FEATURES = ("sepal length (cm)", "sepal width (cm)")
N_PER_CLASS = None


def run_logistic_figures():
    print("Generating plots for logistic regression (GD vs IRLS)...")
    X, y, meta = load_iris_subset(classes=CLASSES, features=FEATURES, n_per_class=N_PER_CLASS)

    gd = LogisticRegressionGD(lr=0.1, max_iter=5000, tol=1e-6).fit(X.values, y.values)
    irls = LogisticRegressionIRLS(max_iter=50, tol=1e-8, ridge=1e-8).fit(X.values, y.values)

    for label, model in (("GD", gd), ("IRLS", irls)):
        errors = misclassification_count(y, model.predict(X.values))
        print(f"  {label}: {model.n_iter_} iterations, {errors} misclassified of {meta['num_samples']}")

    plot_decision_boundary(
        X,
        y,
        {"Gradient descent": gd, "Newton-Raphson (IRLS)": irls},
        class_names=CLASSES,
        title=f"{CLASSES[0]} vs {CLASSES[1]}",
        filename=OUT_DIR / "decision_boundary.png",
    )
    plot_loss_history(
        {"Gradient descent": gd.loss_history_, "Newton-Raphson (IRLS)": irls.loss_history_},
        filename=OUT_DIR / "loss_history.png",
    )
    plot_confusion_matrix_and_roc(
        y, irls.predict_proba(X.values), title="(IRLS)", filename=OUT_DIR / "roc_irls.png"
    )


def run_lasso_figures():
    print("Generating plots for the lasso (diabetes)...")
    X, y, _ = load_regression_dataset("diabetes")

    path = lasso_path(X, y, n_alphas=100)
    ols_norm = np.sum(np.abs(ols_coefficients(X, y)))
    plot_lasso_path(path, x_axis="shrinkage", filename=OUT_DIR / "lasso_path.png")
    plot_lasso_path(path, x_axis="log_alpha", filename=OUT_DIR / "lasso_path_alpha.png")

    for s in (0.25, 0.5, 0.75):
        bound = s * ols_norm
        coef, alpha = lasso_constrained(X, y, bound)
        print(f"  s={s:.2f}: alpha={alpha:.4f}, non-zero {np.count_nonzero(coef)}/{X.shape[1]}")


if __name__ == "__main__":
    run_logistic_figures()
    run_lasso_figures()
    print("All plots generated successfully.")
