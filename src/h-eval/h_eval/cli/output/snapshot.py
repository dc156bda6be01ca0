"""Terminal rendering of MetricSnapshots — colorized table via typer.echo."""

import typer

from h_eval.metrics.domain.snapshot import MetricSnapshot
from h_eval.metrics.domain.value import Defined, Undefined
from h_eval.records.domain.score import Criterion

# ---------------------------------------------------------------------------
# ANSI helpers
# ---------------------------------------------------------------------------
_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"
_CYAN = "\033[36m"
_YELLOW = "\033[33m"
_GREEN = "\033[32m"
_RED = "\033[31m"
_BLUE = "\033[34m"
_WHITE = "\033[97m"

_UNDEFINED_TEXT = "n/a"

_CRITERIA: list[tuple[str, Criterion]] = [
    ("Correctness", Criterion.CORRECTNESS),
    ("Clarity", Criterion.CLARITY),
    ("Relevance", Criterion.RELEVANCE),
    ("Hallucination Risk", Criterion.HALLUCINATION_RISK),
]


def _rule(width: int = 72, color: str = _DIM) -> None:
    typer.echo(f"{color}{'─' * width}{_RESET}")


def _score_color(score: float) -> str:
    if score >= 4.0:
        return _GREEN
    if score >= 3.0:
        return _YELLOW
    return _RED


def _fraction_color(value: float) -> str:
    if value >= 0.75:
        return _GREEN
    if value >= 0.5:
        return _YELLOW
    return _RED


def format_value(value: Defined | Undefined, precision: int = 2) -> str:
    """Render a MetricValue; Undefined never renders as a number."""
    if isinstance(value, Undefined):
        return _UNDEFINED_TEXT
    return f"{value.value:.{precision}f}"


def _colored_fraction(value: Defined | Undefined) -> str:
    if isinstance(value, Undefined):
        return f"{_DIM}{_UNDEFINED_TEXT}{_RESET}  {_DIM}({value.reason}){_RESET}"
    return f"{_fraction_color(value.value)}{value.value:.3f}{_RESET}"


def print_snapshot(snapshot: MetricSnapshot) -> None:
    """Print a snapshot: header, scalar metrics, per-criterion table, win rates."""
    typer.echo("")
    _rule(color=_CYAN)
    typer.echo(
        f"{_CYAN}{_BOLD}  h-eval  ·  {snapshot.scope.kind} {snapshot.scope.key}{_RESET}"
    )
    _rule(color=_CYAN)
    typer.echo("")

    as_of = snapshot.as_of.isoformat() if snapshot.as_of is not None else "now"
    meta_rows: list[tuple[str, str]] = [
        ("Policy", snapshot.policy.value),
        ("Sample size", str(snapshot.sample_size)),
        ("Record set version", str(snapshot.record_set_version)),
        ("As of", as_of),
        ("Computed at", snapshot.computed_at.isoformat()),
    ]
    label_w = max(len(label) for label, _ in meta_rows)
    for label, value in meta_rows:
        typer.echo(f"  {_DIM}{label:<{label_w}}{_RESET}  {_WHITE}{value}{_RESET}")

    typer.echo("")
    scalar_rows: list[tuple[str, str]] = [
        ("Win rate", _colored_fraction(snapshot.win_rate)),
        ("Inter-rater agreement", _colored_fraction(snapshot.inter_rater_agreement)),
        ("Mean latency (ms)", format_value(snapshot.mean_latency_ms, precision=1)),
        ("Mean length", format_value(snapshot.mean_response_length, precision=1)),
    ]
    label_w = max(len(label) for label, _ in scalar_rows)
    for label, value in scalar_rows:
        typer.echo(f"  {_WHITE}{label:<{label_w}}{_RESET}  {value}")

    _print_criteria(snapshot=snapshot)
    if snapshot.scope.kind == "prompt" and snapshot.model_win_rates:
        _print_model_win_rates(snapshot=snapshot)

    typer.echo("")
    _rule(color=_CYAN)
    typer.echo("")


def _print_criteria(snapshot: MetricSnapshot) -> None:
    metric_w = max(len(label) for label, _ in _CRITERIA)
    typer.echo("")
    _rule(color=_BLUE)
    typer.echo(f"{_BLUE}{_BOLD}  Scores{_RESET}")
    _rule(color=_BLUE)
    typer.echo(
        f"  {_DIM}{'Criterion':<{metric_w}}  {'Mean':>6}  {'±StdDev':>7}  {'N':>4}  Bar{_RESET}"
    )
    typer.echo(f"  {'─' * metric_w}  {'─' * 6}  {'─' * 7}  {'─' * 4}  {'─' * 10}")

    for label, criterion in _CRITERIA:
        stats = snapshot.mean_scores[criterion]
        mean_text = format_value(stats.mean)
        std_text = format_value(stats.stddev)
        if isinstance(stats.mean, Defined):
            color = _score_color(stats.mean.value)
            filled = round(stats.mean.value)
            bar = f"{color}{'█' * filled}{_DIM}{'░' * (5 - filled)}{_RESET}"
        else:
            color = _DIM
            bar = f"{_DIM}{'░' * 5}{_RESET}"
        typer.echo(
            f"  {_WHITE}{label:<{metric_w}}{_RESET}"
            f"  {color}{mean_text:>6}{_RESET}"
            f"  {_DIM}{std_text:>7}{_RESET}"
            f"  {stats.count:>4}"
            f"  {bar}"
        )


def _print_model_win_rates(snapshot: MetricSnapshot) -> None:
    typer.echo("")
    _rule(color=_BLUE)
    typer.echo(f"{_BLUE}{_BOLD}  Win Rate by Model{_RESET}")
    _rule(color=_BLUE)
    model_w = max(len(model) for model in snapshot.model_win_rates)
    for model, rate in snapshot.model_win_rates.items():
        typer.echo(f"  {_WHITE}{model:<{model_w}}{_RESET}  {_colored_fraction(rate)}")
