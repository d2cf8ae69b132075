from __future__ import annotations

"""
CLI entrypoint for the worked examples. Pick experiment via --experiment:
gd (logistic regression by gradient descent), irls (Newton-Raphson / IRLS),
compare (both solvers side by side), lasso (penalized fit, path, bound form).
"""

import argparse
from pathlib import Path

import numpy as np
from sklearn.linear_model import Lasso as SklearnLasso
from sklearn.linear_model import LogisticRegression
from sklearn.pipeline import make_pipeline
from sklearn.preprocessing import StandardScaler

from statlearn import (
    DEFAULT_CLASSES,
    IRIS_CLASSES,
    Lasso,
    LogisticRegressionGD,
    LogisticRegressionIRLS,
    compute_classification_metrics,
    compute_regression_metrics,
    lasso_constrained,
    lasso_path,
    load_iris_subset,
    load_regression_dataset,
    make_train_test_split,
    summarize_coefficients,
)
from statlearn import constants
from statlearn.plotting import (
    plot_confusion_matrix_and_roc,
    plot_decision_boundary,
    plot_lasso_path,
    plot_loss_history,
)


def describe_dataset(meta: dict):
    """Print a short summary of the Iris subset."""
    print(
        f"Iris subset {meta['classes'][0]} vs {meta['classes'][1]}: "
        f"{meta['num_samples']} samples, features: {meta['features']}"
    )
    print(f"Positive class: {meta['positive_class']} (rate {meta['positive_rate']:.3f})")


def print_metrics(label: str, metrics: dict):
    """Nicely format the metric dict produced by compute_classification_metrics."""
    cm = metrics["confusion_matrix"]
    print(
        f"[{label}] Acc {metrics['accuracy']:.3f} | "
        f"Prec {metrics['precision']:.3f} | Rec {metrics['recall']:.3f} | "
        f"F1 {metrics['f1']:.3f} | ROC-AUC {metrics['roc_auc']:.3f} | "
        f"LogLoss {metrics['log_loss']:.4f} | Misclassified {metrics['misclassified']}"
    )
    print(f"    Confusion matrix [[TN, FP], [FN, TP]]: {cm.tolist()}")


def print_solution(label: str, model, feature_names: list[str]):
    coefs = ", ".join(f"{name}={c:.4f}" for name, c in zip(feature_names, model.coef_))
    status = "converged" if model.converged_ else "NOT converged"
    print(f"    {label}: intercept={model.intercept_:.4f}, {coefs}")
    print(f"    {label}: {model.n_iter_} iterations ({status}), final loss {model.loss_history_[-1]:.6f}")


def _parse_features(raw: str) -> list[str]:
    names = [f.strip() for f in raw.split(",") if f.strip()]
    unknown = [f for f in names if f not in constants.FEATURE_ALIASES]
    if unknown:
        raise argparse.ArgumentTypeError(
            f"Unknown features {unknown}; pick from {sorted(constants.FEATURE_ALIASES)}"
        )
    return [constants.FEATURE_ALIASES[f] for f in names]


def build_arg_parser():
    """CLI parser with knobs for the dataset, the solvers, and experiment choice."""
    parser = argparse.ArgumentParser(
        description="Logistic regression (GD / IRLS) and the lasso, from first principles."
    )
    parser.add_argument(
        "--experiment",
        choices=["gd", "irls", "compare", "lasso"],
        default="compare",
        help="gd / irls: one logistic solver; compare: both; lasso: lasso fit, path and bound form.",
    )
    parser.add_argument(
        "--classes",
        nargs=2,
        choices=IRIS_CLASSES,
        default=list(DEFAULT_CLASSES),
        help="Two Iris species; the second one is the positive class.",
    )
    parser.add_argument(
        "--features",
        type=_parse_features,
        default=list(constants.DEFAULT_FEATURES),
        help="Comma-separated Iris features, e.g. sepal_length,sepal_width.",
    )
    parser.add_argument("--n-per-class", type=int, default=None, help="Keep the first N rows per class.")
    parser.add_argument("--lr", type=float, default=constants.GD_LEARNING_RATE, help="Learning rate for GD.")
    parser.add_argument("--l2", type=float, default=0.0, help="L2 penalty for both logistic solvers.")
    parser.add_argument("--max-iter", type=int, default=constants.GD_MAX_ITER, help="Max steps for GD.")
    parser.add_argument(
        "--irls-max-iter", type=int, default=constants.IRLS_MAX_ITER, help="Max Newton steps for IRLS."
    )
    parser.add_argument("--tol", type=float, default=constants.TOLERANCE, help="Step-norm tolerance.")
    parser.add_argument(
        "--ridge",
        type=float,
        default=constants.IRLS_RIDGE,
        help="Constant added to the diagonal of the IRLS system.",
    )
    parser.add_argument(
        "--dataset",
        choices=constants.REGRESSION_DATASETS,
        default="diabetes",
        help="Regression data for the lasso experiment.",
    )
    parser.add_argument("--alpha", type=float, default=constants.LASSO_ALPHA, help="Lasso penalty.")
    parser.add_argument("--n-alphas", type=int, default=constants.LASSO_N_ALPHAS, help="Lasso path grid size.")
    parser.add_argument(
        "--bound",
        type=float,
        default=None,
        help="L1 bound t for the constrained lasso (standardized coefficients).",
    )
    parser.add_argument("--test-size", type=float, default=0.2, help="Held-out share for the lasso experiment.")
    parser.add_argument("--random-state", type=int, default=42, help="Random seed for splits.")
    parser.add_argument("--plot-dir", type=Path, default=None, help="Write figures to this directory.")
    parser.add_argument("--verbose", action="store_true", help="Print solver progress.")
    return parser


def adjust_sklearn_coefficients(pipeline) -> tuple[float, np.ndarray]:
    """
    Convert coefficients from standardized space back to original units.
    """
    logreg = pipeline.named_steps["logisticregression"]
    scaler: StandardScaler = pipeline.named_steps["standardscaler"]

    scaled_coef = logreg.coef_[0]
    raw_coef = scaled_coef / scaler.scale_
    intercept = logreg.intercept_[0] - np.sum((scaler.mean_ / scaler.scale_) * scaled_coef)
    return intercept, raw_coef


def fit_sklearn_reference(X, y, l2: float):
    """Reference scikit-learn fit with the same objective as the custom solvers."""
    if l2:
        # sklearn minimizes C * sum(loss) + ||w||^2 / 2; ours is mean(loss) + l2 ||w||^2 / 2
        clf = LogisticRegression(C=1.0 / (len(y) * l2), max_iter=10000)
    else:
        clf = LogisticRegression(penalty=None, max_iter=10000)
    model = make_pipeline(StandardScaler(), clf)
    model.fit(X, y)
    return model


def _plot_path(args: argparse.Namespace, name: str) -> Path | None:
    if args.plot_dir is None:
        return None
    args.plot_dir.mkdir(parents=True, exist_ok=True)
    return args.plot_dir / name


def run_logistic(args: argparse.Namespace):
    """Fit the requested logistic solver(s) on the Iris subset and report."""
    X, y, meta = load_iris_subset(
        classes=args.classes, features=args.features, n_per_class=args.n_per_class
    )
    describe_dataset(meta)

    models = {}
    if args.experiment in ("gd", "compare"):
        models["GD"] = LogisticRegressionGD(
            lr=args.lr,
            max_iter=args.max_iter,
            tol=args.tol,
            l2=args.l2,
            verbose=args.verbose,
        )
    if args.experiment in ("irls", "compare"):
        models["IRLS"] = LogisticRegressionIRLS(
            max_iter=args.irls_max_iter,
            tol=args.tol,
            ridge=args.ridge,
            l2=args.l2,
            standardize=True,
            verbose=args.verbose,
        )

    for label, model in models.items():
        model.fit(X.values, y.values)
        print_metrics(label, compute_classification_metrics(y, model.predict_proba(X.values)))
        print_solution(label, model, list(X.columns))

    sk_model = fit_sklearn_reference(X, y, args.l2)
    sk_probs = sk_model.predict_proba(X)[:, 1]
    print_metrics("sklearn LogisticRegression", compute_classification_metrics(y, sk_probs))
    sk_intercept, sk_coef = adjust_sklearn_coefficients(sk_model)
    coefs = ", ".join(f"{name}={c:.4f}" for name, c in zip(X.columns, sk_coef))
    print(f"    sklearn: intercept={sk_intercept:.4f}, {coefs}")

    if args.plot_dir is not None:
        class_names = tuple(meta["classes"])
        if X.shape[1] == 2:
            plot_decision_boundary(
                X, y, models, class_names=class_names, filename=_plot_path(args, "decision_boundary.png")
            )
        plot_loss_history(
            {label: m.loss_history_ for label, m in models.items()},
            filename=_plot_path(args, "loss_history.png"),
        )
        first = next(iter(models.values()))
        plot_confusion_matrix_and_roc(
            y, first.predict_proba(X.values), title=f"({first.label})", filename=_plot_path(args, "roc.png")
        )
        print(f"Figures written to {args.plot_dir}")


def run_lasso(args: argparse.Namespace):
    """Penalized lasso fit, comparison with scikit-learn, coefficient path, bound form."""
    X, y, meta = load_regression_dataset(args.dataset, random_state=args.random_state)
    print(f"Regression dataset '{meta['name']}': {meta['num_samples']} samples, {meta['feature_count']} features")

    train_ids, test_ids = make_train_test_split(
        X, y, test_size=args.test_size, random_state=args.random_state, stratify=False
    )
    X_train, X_test = X.loc[train_ids], X.loc[test_ids]
    y_train, y_test = y.loc[train_ids], y.loc[test_ids]
    print(f"Train size: {len(train_ids)}, Test size: {len(test_ids)}")

    model = Lasso(alpha=args.alpha, tol=args.tol, verbose=args.verbose)
    model.fit(X_train.values, y_train.values)
    summary = compute_regression_metrics(y_test, model.predict(X_test.values), model.coef_)
    print(
        f"[Lasso alpha={args.alpha}] MSE {summary['mse']:.3f} | R2 {summary['r2']:.3f} | "
        f"non-zero {summary['n_nonzero']}/{X.shape[1]} | sweeps {model.n_iter_}"
    )

    sk_model = make_pipeline(StandardScaler(), SklearnLasso(alpha=args.alpha, max_iter=100000, tol=1e-10))
    sk_model.fit(X_train, y_train)
    sk_summary = compute_regression_metrics(
        y_test, sk_model.predict(X_test), sk_model.named_steps["lasso"].coef_
    )
    print(
        f"[sklearn Lasso alpha={args.alpha}] MSE {sk_summary['mse']:.3f} | R2 {sk_summary['r2']:.3f} | "
        f"non-zero {sk_summary['n_nonzero']}/{X.shape[1]}"
    )
    gap = np.max(np.abs(model.coef_std_ - sk_model.named_steps["lasso"].coef_))
    print(f"    Max coefficient gap vs sklearn (standardized): {gap:.2e}")

    top = summarize_coefficients(model.coef_std_, list(X.columns), top_k=5)
    print("\nLargest positive coefficients (standardized):")
    print(top["positive"])
    print("\nLargest negative coefficients (standardized):")
    print(top["negative"])

    path = lasso_path(X_train, y_train, n_alphas=args.n_alphas, tol=args.tol)
    print(
        f"\nLasso path: {len(path.alphas)} alphas from {path.alphas[0]:.4f} to {path.alphas[-1]:.6f}, "
        f"shrinkage {path.shrinkage[0]:.3f} -> {path.shrinkage[-1]:.3f}"
    )
    for name, alpha_in in _entry_order(path).items():
        print(f"    {name} enters at alpha={alpha_in:.4f}")

    if args.bound is not None:
        coef, alpha = lasso_constrained(X_train, y_train, args.bound)
        print(
            f"\nBound t={args.bound}: ||b||_1={np.sum(np.abs(coef)):.4f} at alpha={alpha:.4f}, "
            f"non-zero {np.count_nonzero(coef)}/{X.shape[1]}"
        )

    if args.plot_dir is not None:
        plot_lasso_path(path, x_axis="shrinkage", filename=_plot_path(args, "lasso_path.png"))
        plot_lasso_path(path, x_axis="log_alpha", filename=_plot_path(args, "lasso_path_alpha.png"))
        print(f"Figures written to {args.plot_dir}")


def _entry_order(path) -> dict[str, float]:
    """Alpha at which each feature first becomes non-zero along the path."""
    entries = {}
    for j, name in enumerate(path.feature_names):
        nonzero = np.flatnonzero(path.coefs[:, j])
        if nonzero.size:
            entries[name] = float(path.alphas[nonzero[0]])
    return dict(sorted(entries.items(), key=lambda item: -item[1]))


def main(args: argparse.Namespace | None = None):
    """Dispatch to the selected experiment."""
    args = args or build_arg_parser().parse_args()

    if args.experiment == "lasso":
        run_lasso(args)
    else:
        run_logistic(args)


if __name__ == "__main__":
    main()
