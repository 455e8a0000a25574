"""
Lesson runners.

This is the ONLY module that imports from all other modules.
Each lesson is a linear script: ingestion → features → (models) →
evaluation → report.
"""

import logging
from pathlib import Path

import numpy as np
import pandas as pd

from tennis_lessons.orchestration.config import load_config
from tennis_lessons.ingestion.matches import MatchesLoader
from tennis_lessons.ingestion.slam_pbp import SlamPointsLoader
from tennis_lessons.ingestion.validator import DataValidator
from tennis_lessons.features.serve import add_serve_ratios, filter_valid_matches
from tennis_lessons.features.reshape import (
    favourite_win_rate, melt_stats, summarize_by,
)
from tennis_lessons.features.points import (
    first_server_by_event, first_server_outcomes, game_seven_outcomes,
    summarize_first_server, summarize_game_seven,
)
from tennis_lessons.features.matchup import build_matchup_frame, stratified_split
from tennis_lessons.models.registry import create_models
from tennis_lessons.evaluation.metrics import evaluate_holdout
from tennis_lessons.evaluation.importance import variable_importance
from tennis_lessons.evaluation.compare import (
    compare_resamples, holdout_table, resample_table,
)
from tennis_lessons.evaluation.significance import paired_bootstrap_test
from tennis_lessons.evaluation.report import generate_eda_report, generate_model_report
from tennis_lessons.eda import charts
from tennis_lessons.utils.plotting import set_theme

log = logging.getLogger(__name__)

BASELINE = "logistic"


def load_matches(cfg: dict, section: dict) -> pd.DataFrame:
    """Load the match table configured for one lesson; empty when absent."""
    atp_dir = Path(cfg["data_acquisition"]["atp"]["clone_dir"])
    if not atp_dir.exists():
        log.error(f"Match data not found at {atp_dir}. Run `acquire` first.")
        return pd.DataFrame()
    loader = MatchesLoader(str(atp_dir), tour=section.get("tour", "atp"), years=section.get("years"))
    matches = loader.load()
    for w in loader.validate(matches):
        log.warning(f"Loader: {w}")
    return matches


def load_points(cfg: dict, section: dict) -> pd.DataFrame:
    pbp_dir = Path(cfg["data_acquisition"]["slam_pbp"]["clone_dir"])
    if not pbp_dir.exists():
        log.info(f"No point-level data at {pbp_dir}; skipping point analyses")
        return pd.DataFrame()
    loader = SlamPointsLoader(str(pbp_dir), years=section.get("years"), slams=section.get("slams"))
    points = loader.load()
    for w in loader.validate(points)[:10]:
        log.warning(f"Loader: {w}")
    return points


# ── EDA lesson ─────────────────────────────────────────────────────────

def run_eda(config_path: str = "configs/default.yaml") -> dict:
    """EDA end-to-end: load → validate → ratios → filter → reshape → charts."""
    cfg = load_config(config_path)
    eda = cfg["eda"]
    plot_dir = cfg["paths"].get("plots", "reports/figures")
    set_theme()

    # ── 1. Load data ──
    log.info("EDA Step 1: Loading match data")
    matches = load_matches(cfg, eda)
    if matches.empty:
        log.error("No data. Run data acquisition first.")
        return {"error": "no_data"}

    # ── 2. Validate ──
    log.info("EDA Step 2: Validating data")
    validation = DataValidator().validate(matches)
    log.info(f"Validation: {validation['stats']}")

    # ── 3. Derived ratios + filtering ──
    log.info("EDA Step 3: Serve ratios and filtering")
    with_ratios = add_serve_ratios(matches)
    valid = filter_valid_matches(with_ratios, eda.get("min_service_points", 1))
    if valid.empty:
        log.error("No matches left after filtering")
        return {"error": "empty_dataset", "validation": validation}

    # ── 4. Reshape + summaries ──
    log.info("EDA Step 4: Reshaping and summarizing")
    long = melt_stats(valid, eda["stats"])
    summary = summarize_by(long, eda.get("group_by", ["surface", "role"]))
    favourite = favourite_win_rate(valid, ["surface"])
    favourite_by_year = favourite_win_rate(valid, ["year", "surface"])

    plots = [
        charts.plot_stat_distributions(long, plot_dir),
        charts.plot_stat_boxplots(long, plot_dir),
        charts.plot_favourite_win_rate(favourite_by_year, plot_dir),
    ]

    result = {
        "validation": validation,
        "matches": {"loaded": len(matches), "kept": len(valid)},
        "summary": summary,
        "favourite_by_surface": favourite,
        "favourite_by_year": favourite_by_year,
        "game_seven": None,
        "first_server": None,
    }

    # ── 5. Point-level questions ──
    points = load_points(cfg, eda.get("point_level", {}))
    if not points.empty:
        log.info("EDA Step 5: Point-level analyses")
        sevens = game_seven_outcomes(points)
        result["game_seven"] = summarize_game_seven(sevens)
        plots.append(charts.plot_game_seven(result["game_seven"], plot_dir))

        first = first_server_outcomes(points)
        result["first_server"] = summarize_first_server(first)
        result["first_server_by_event"] = first_server_by_event(first)
        plots.append(charts.plot_first_server(
            result["first_server"], result["first_server_by_event"], plot_dir,
        ))

    result["plots"] = [str(p) for p in plots if p is not None]
    result["report_path"] = generate_eda_report(result, cfg["paths"].get("reports", "reports"))
    return result


# ── Modelling lesson ───────────────────────────────────────────────────

def run_modelling(config_path: str = "configs/default.yaml") -> dict:
    """Modelling end-to-end: data → match-up table → split → tune → evaluate → report."""
    cfg = load_config(config_path)
    mcfg = cfg["modelling"]
    seed = mcfg.get("random_seed", 42)
    set_theme()

    # ── 1. Load + clean ──
    log.info("Modelling Step 1: Loading match data")
    matches = load_matches(cfg, mcfg)
    if matches.empty:
        log.error("No data. Run data acquisition first.")
        return {"error": "no_data"}
    valid = filter_valid_matches(
        add_serve_ratios(matches), mcfg.get("min_service_points", 1),
    )

    # ── 2. Match-up table ──
    log.info("Modelling Step 2: Building match-up table")
    if valid.empty:
        log.error("Dataset has 0 samples after filtering")
        return {"error": "empty_dataset"}
    frame = build_matchup_frame(
        valid, mcfg["features"], seed=seed,
        include_surface=mcfg.get("include_surface", False),
    )
    if frame.n_samples == 0:
        log.error("Dataset has 0 samples after feature engineering")
        return {"error": "empty_dataset"}

    # ── 3. Partition ──
    log.info("Modelling Step 3: Stratified train/test split")
    try:
        train, test = stratified_split(frame, mcfg.get("train_fraction", 0.75), seed=seed)
    except ValueError as e:
        log.error(f"Cannot split {frame.n_samples} matches: {e}")
        return {"error": "too_few_samples"}

    cv = mcfg.get("cv", {})
    folds = cv.get("folds", 10)
    smallest = int(np.bincount(train.y, minlength=2).min())
    if smallest < folds:
        log.error(
            f"Training set has {smallest} matches in its smaller class, "
            f"fewer than the {folds} CV folds"
        )
        return {"error": "too_few_samples"}

    # ── 4. Tune every family ──
    log.info("Modelling Step 4: Tuning classifier families")
    models = create_models(
        mcfg["models"],
        folds=folds,
        repeats=cv.get("repeats", 3),
        scoring=cv.get("scoring", "neg_log_loss"),
        n_jobs=cv.get("n_jobs", 1),
        seed=seed,
    )

    models_dir = Path(cfg["paths"].get("models", "models"))
    per_model = {}
    histories = {}
    evaluations = {}
    probabilities = {}
    for name, model in models.items():
        log.info(f"Training {name}")
        history = model.fit(train)
        histories[name] = history

        # ── 5. Held-out evaluation ──
        proba = model.predict_proba(test)
        probabilities[name] = proba
        log.info(f"{name} held-out:")
        evaluations[name] = evaluate_holdout(test.y, proba)

        importance = variable_importance(
            model, test, n_repeats=mcfg.get("importance_repeats", 10), seed=seed,
        )
        model.save(str(models_dir / f"{name}.joblib"))
        per_model[name] = {
            "history": history,
            "holdout": evaluations[name],
            "importance": importance,
        }

    # ── 6. Compare ──
    log.info("Modelling Step 6: Comparing models")
    if BASELINE in probabilities:
        for name, proba in probabilities.items():
            if name == BASELINE:
                continue
            per_model[name]["vs_baseline"] = paired_bootstrap_test(
                test.y, probabilities[BASELINE], proba,
                n_bootstrap=mcfg.get("bootstrap_samples", 2000), seed=seed,
            )

    holdout = holdout_table(evaluations)
    result = {
        "data": {
            "matches": frame.n_samples,
            "train": train.n_samples,
            "test": test.n_samples,
            "features": frame.feature_names,
            "positive_rate": frame.positive_rate,
        },
        "models": per_model,
        "resamples": compare_resamples(histories),
        "resample_table": resample_table(histories),
        "holdout": holdout,
        "best_model": holdout["model"].iloc[0] if len(holdout) else None,
    }
    log.info(f"Best model on held-out log-loss: {result['best_model']}")

    result["report_path"] = generate_model_report(
        result, cfg["paths"].get("reports", "reports"),
    )
    return result

