import numpy as np
import pandas as pd

from cvselect.config import Settings, setup_logging
from cvselect.crossval import evaluate
from cvselect.data import class_balance, load_breast_cancer, to_table
from cvselect.folds import FoldPartitioner
from cvselect.models import DiscriminantClassifier, fit_logistic
from cvselect.penalized import l1_logistic_cv
from cvselect.search import run_best_subset, run_discriminant_search


def print_header(title):
    print("\n" + "="*60)
    print(title)
    print("="*60)


def main(settings=None):

    settings = (settings or Settings()).validate()
    logger = setup_logging(settings.log_dir)

    # Fetch data
    df = load_breast_cancer(settings.data_source)
    table = to_table(df, standardize=settings.standardize)
    logger.info(f"Observation table: n={table.n}, p={table.p}")
    print(class_balance(table))

    # One fold assignment shared by every model below
    folds = FoldPartitioner(n_folds=settings.n_folds, seed=settings.seed).partition(table.n)

    # Full logistic regression
    print_header("Logistic regression (all predictors)")
    print(fit_logistic(table.X, table.y, table.feature_names).round(4))
    print(f"\nOLS CV error, all predictors: {evaluate(table.X, table.y, folds):.6f}")

    # Best subset selection
    print_header("Best subset selection")
    nested = run_best_subset(table, folds)
    curve = pd.DataFrame({
        "size": [s.size for s in nested.subsets],
        "predictors": [", ".join(s.names(table.feature_names)) for s in nested.subsets],
        "AIC": nested.criteria["AIC"],
        "BIC": nested.criteria["BIC"],
        "cv_error": nested.errors,
    })
    with pd.option_context('display.float_format', '{:,.6f}'.format, 'display.max_colwidth', 120):
        print(curve.to_string(index=False))
    for name in ("AIC", "BIC"):
        chosen = nested.best_features(name)
        print(f"{name}: size {nested.best_size[name]} -> {chosen.names(table.feature_names)} "
              f"(CV error {nested.best_error[name]:.6f})")

    # L1-penalized logistic regression
    print_header(f"L1 logistic regression (measure = {settings.measure})")
    path = l1_logistic_cv(table.X, table.y, folds, settings.lambdas,
                          measure=settings.measure, feature_names=table.feature_names)
    print(f"lambda.min = {path.lambda_min:.6e} ({path.n_nonzero('min')} nonzero)")
    print(f"lambda.1se = {path.lambda_1se:.6e} ({path.n_nonzero('1se')} nonzero)")
    print(pd.DataFrame({"lambda.min": path.coef_min, "lambda.1se": path.coef_1se}).round(4))
    print(f"CV error at lambda.min: {np.min(path.cv_error):.6f}")

    # Discriminant analysis over every subset
    results = {}
    for kind in DiscriminantClassifier.KINDS:
        print_header(f"{kind.capitalize()} discriminant analysis, all subsets")
        classifier = DiscriminantClassifier(kind=kind, n_folds=settings.n_folds, seed=settings.seed)
        search, winner = run_discriminant_search(table, classifier,
                                                 n_jobs=settings.n_jobs, on_error=settings.on_error)
        print(f"Subsets visited: {search.n_visited}, skipped: {len(search.skipped)}")
        if winner is None:
            print("No subset beat the error sentinel")
            continue
        print(f"Best subset: {winner.features.names(table.feature_names)}")
        print(f"Error rate: {winner.error_rate:.4f}")
        print(winner.confusion)
        results[kind] = winner

    return {
        "best_subset": nested,
        "l1_logistic": path,
        "discriminant": results,
    }


if __name__ == "__main__":
    main()
