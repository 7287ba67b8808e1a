"""
Replay recorded pitch samples through a tuning session.

Feeds a log of detector output (timestamp, frequency, confidence) through
TunerSession exactly as the live tuner would, then prints a summary and plots
the raw and smoothed cents, the resolved string and the in-tune state over
time. Without an input file a synthetic session is generated: a guitar
player plucking a flat A string, tuning it up, then moving to the D string.

Input formats:
    JSON: [{"t": 0.0, "frequency_hz": 108.2, "confidence": 0.93}, ...]
    CSV:  t,frequency_hz,confidence header followed by rows

Usage:
    python scripts/replay_samples.py [samples.json|samples.csv]
        [--tuning "Drop D"] [--manual A2] [--output scripts/replay.png]
"""

import argparse
import csv
import json
import logging
from datetime import datetime
from pathlib import Path

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np

from string_tuner import Sample, TunerConfig, TunerReading, TunerSession, get_tuning, load_tuning

logger = logging.getLogger("replay_samples")


def load_samples(path: Path) -> list[tuple[float, Sample]]:
    """Load (timestamp, Sample) pairs from a JSON or CSV log."""
    if path.suffix.lower() == ".json":
        with open(path, 'r', encoding='utf-8') as f:
            rows = json.load(f)
    else:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            rows = list(csv.DictReader(f))

    samples = []
    for row in rows:
        samples.append((
            float(row["t"]),
            Sample(float(row["frequency_hz"]), float(row.get("confidence", 1.0))),
        ))
    samples.sort(key=lambda s: s[0])
    return samples


def synthesize_samples(rate_hz: float = 30.0, seed: int = 7) -> list[tuple[float, Sample]]:
    """
    Generate a synthetic tuning session.

    Timeline:
        0.0-0.5 s  silence
        0.5-4.0 s  A string ~40 cents flat, tuned up to pitch, then held
        4.0-4.5 s  silence
        4.5-7.0 s  D string slightly sharp, settling in tune

    Args:
        rate_hz: Detector update rate
        seed: Random seed for the pitch jitter

    Returns:
        List of (timestamp, Sample)
    """
    rng = np.random.default_rng(seed)
    times = np.arange(0.0, 7.0, 1.0 / rate_hz)
    samples = []

    for t in times:
        if t < 0.5 or 4.0 <= t < 4.5:
            samples.append((float(t), Sample(0.0, 0.0)))
            continue

        if t < 4.0:
            # Peg turned steadily from -40 cents to 0 over two seconds
            cents = min(0.0, -40.0 + 20.0 * (t - 0.5))
            target = 110.0
        else:
            cents = 8.0 * np.exp(-(t - 4.5) / 0.6)
            target = 146.83

        cents += rng.normal(0.0, 2.5)
        freq = target * 2 ** (cents / 1200)
        confidence = float(np.clip(rng.normal(0.9, 0.05), 0.0, 1.0))
        samples.append((float(t), Sample(float(freq), confidence)))

    return samples


def replay(
    session: TunerSession,
    samples: list[tuple[float, Sample]],
) -> list[tuple[float, TunerReading]]:
    """Run samples through the session and collect readings."""
    return [(t, session.process(sample, now=t)) for t, sample in samples]


def summarize(readings: list[tuple[float, TunerReading]]) -> dict:
    """Build a summary report of a replay."""
    valid = [(t, r) for t, r in readings if r.valid]
    triggers = [
        {"t": round(t, 3), "target": r.target.name, "cents": round(r.smoothed_cents, 2)}
        for t, r in readings if r.did_trigger
    ]

    target_changes = []
    last_name = None
    for t, r in valid:
        if r.target.name != last_name:
            target_changes.append({"t": round(t, 3), "target": r.target.name})
            last_name = r.target.name

    in_tune_time = 0.0
    for (t0, r0), (t1, _) in zip(readings, readings[1:]):
        if r0.in_tune:
            in_tune_time += t1 - t0

    raw = np.array([r.raw_cents for _, r in valid]) if valid else np.array([])
    smoothed = np.array([r.smoothed_cents for _, r in valid]) if valid else np.array([])

    return {
        "timestamp": datetime.now().isoformat(),
        "samples": len(readings),
        "valid_samples": len(valid),
        "success_count": readings[-1][1].success_count if readings else 0,
        "triggers": triggers,
        "target_changes": target_changes,
        "in_tune_seconds": round(in_tune_time, 3),
        # Sample-to-sample jitter before and after smoothing
        "raw_jitter_cents": float(np.std(np.diff(raw))) if len(raw) > 2 else 0.0,
        "smoothed_jitter_cents": float(np.std(np.diff(smoothed))) if len(smoothed) > 2 else 0.0,
    }


def print_summary(report: dict) -> None:
    """Print a human-readable summary."""
    print("=" * 60)
    print("REPLAY SUMMARY")
    print("=" * 60)
    print(f"Samples:           {report['samples']} ({report['valid_samples']} with signal)")
    print(f"Time in tune:      {report['in_tune_seconds']:.2f} s")
    print(f"Success events:    {report['success_count']}")
    print(f"Raw jitter:        {report['raw_jitter_cents']:.2f} cents")
    print(f"Smoothed jitter:   {report['smoothed_jitter_cents']:.2f} cents")
    print()
    print("String changes:")
    for change in report["target_changes"]:
        print(f"  {change['t']:7.3f} s  {change['target']}")
    print("Triggers:")
    for trigger in report["triggers"]:
        print(f"  {trigger['t']:7.3f} s  {trigger['target']:<4} {trigger['cents']:+.2f} cents")
    print("=" * 60)


def plot_replay(
    readings: list[tuple[float, TunerReading]],
    config: TunerConfig,
    filename: Path,
) -> None:
    """Plot cents, resolved string and in-tune state over time."""
    times = np.array([t for t, _ in readings])
    raw = np.array([r.raw_cents if r.valid else np.nan for _, r in readings])
    smoothed = np.array([r.smoothed_cents if r.valid else np.nan for _, r in readings])
    display = np.array([r.cents if r.valid else np.nan for _, r in readings])
    in_tune = np.array([1.0 if r.in_tune else 0.0 for _, r in readings])

    fig, (ax1, ax2) = plt.subplots(
        2, 1, figsize=(12, 7), sharex=True, gridspec_kw={"height_ratios": [3, 1]}
    )

    threshold = config.in_tune_threshold_cents
    ax1.plot(times, raw, '.', color='gray', markersize=3, alpha=0.6, label='Raw')
    ax1.plot(times, smoothed, '-', color='blue', linewidth=1.0, label='Smoothed')
    ax1.plot(times, display, '-', color='orange', linewidth=1.5, alpha=0.7, label='Display')
    ax1.axhspan(-threshold, threshold, color='green', alpha=0.15, label=f'±{threshold:g} cents')

    for t, r in readings:
        if r.did_trigger:
            ax1.axvline(t, color='green', linestyle='--', linewidth=1)
            ax1.annotate(r.target.name, (t, threshold), textcoords="offset points",
                         xytext=(3, 5), color='green')

    limit = config.display_limit_cents
    ax1.set_ylim(-limit * 1.2, limit * 1.2)
    ax1.set_ylabel('Cents')
    ax1.set_title('Tuning session replay')
    ax1.legend(loc='upper right')
    ax1.grid(True, alpha=0.3)

    ax2.fill_between(times, in_tune, step='post', color='green', alpha=0.4)
    ax2.set_ylim(0, 1.1)
    ax2.set_yticks([0, 1])
    ax2.set_yticklabels(['off', 'in tune'])
    ax2.set_xlabel('Time (s)')
    ax2.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(filename, dpi=100)
    plt.close(fig)
    print(f"Saved: {filename}")


def main():
    """Main replay workflow."""
    parser = argparse.ArgumentParser(description="Replay pitch samples through the tuner")
    parser.add_argument("samples", nargs="?", help="JSON or CSV sample log (synthetic if omitted)")
    parser.add_argument("--tuning", default="Standard", help="Built-in tuning name or tuning file")
    parser.add_argument("--manual", metavar="STRING", help="Disable auto mode and tune this string")
    parser.add_argument("--alpha", type=float, default=None, help="Smoothing alpha override")
    parser.add_argument("--output", default="scripts/replay.png", help="Plot file")
    parser.add_argument("--report", help="Write the JSON summary to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )

    if Path(args.tuning).exists():
        target_set = load_tuning(args.tuning)
    else:
        target_set = get_tuning(args.tuning)

    config = TunerConfig() if args.alpha is None else TunerConfig(smoothing_alpha=args.alpha)
    session = TunerSession(target_set=target_set, config=config, auto_mode=args.manual is None)
    if args.manual:
        session.select_target(args.manual)

    if args.samples:
        samples = load_samples(Path(args.samples))
        logger.info("Loaded %d samples from %s", len(samples), args.samples)
    else:
        samples = synthesize_samples()
        logger.info("Generated %d synthetic samples", len(samples))

    readings = replay(session, samples)
    report = summarize(readings)
    print_summary(report)

    if args.report:
        with open(args.report, 'w') as f:
            json.dump(report, f, indent=2)
        print(f"Report saved: {args.report}")

    plot_replay(readings, config, Path(args.output))


if __name__ == "__main__":
    main()
