#!/usr/bin/env python3
"""
Analyze the per-round census CSV written by darwin_sim (metrics.append_csv).

Features:
  - --session latest|<id> filters to a single run (so runs/ never needs cleaning)
  - Saves a timestamped wide CSV (one column per species) and a PNG under --outdir
  - Plot:
      (1) creature count per species over rounds
      (2) infections & successful hops per round
Usage:
  python analyze_rounds.py --csv runs/rounds.csv --outdir reports --tag demo --session latest
"""
import argparse
import os
import sys
import time
import pandas as pd

# Use non-interactive backend for headless operation
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt


# ------------------------- utilities -------------------------
def ensure_dir(p: str) -> None:
    os.makedirs(p, exist_ok=True)

def timestamp(tag: str | None = None) -> str:
    t = time.strftime("%Y%m%d_%H%M%S")
    return f"{t}__{tag}" if tag else t


# ------------------------- loading ---------------------------
def load_rounds(path: str) -> pd.DataFrame:
    if not os.path.exists(path):
        print(
            "\n[ERROR] Census CSV not found.\n"
            f"  Expected: {path}\n"
            "Hints:\n"
            "  • Run `python -m darwin_sim.main --csv runs/rounds.csv ...` first.\n",
            file=sys.stderr
        )
        sys.exit(1)
    df = pd.read_csv(path)
    for col in ("round", "count", "infections", "moves", "aborted"):
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")
    return df


def filter_session(df: pd.DataFrame, session: str) -> pd.DataFrame:
    """'' keeps everything, 'latest' picks the last session_id in file order."""
    if not session or "session_id" not in df.columns or len(df) == 0:
        return df
    sid = df["session_id"].dropna().iloc[-1] if session == "latest" else session
    print(f"[OK] Filtering analysis to session_id={sid}")
    return df[df["session_id"] == sid].copy()


# ------------------------- shaping ---------------------------
def species_counts(df: pd.DataFrame) -> pd.DataFrame:
    """Wide table: index = round, one column per species (mean across sessions)."""
    wide = df.pivot_table(index="round", columns="species", values="count", aggfunc="mean")
    wide.columns.name = None
    return wide.sort_index()


def round_events(df: pd.DataFrame) -> pd.DataFrame:
    """Per-round infections/moves/aborted (repeated on every species row, so de-duplicate first)."""
    keys = [k for k in ("session_id", "round") if k in df.columns]
    per_round = df.drop_duplicates(subset=keys)
    return per_round.groupby("round")[["infections", "moves", "aborted"]].mean().sort_index()


# ------------------------- plotting --------------------------
def plot_rounds(counts: pd.DataFrame, events: pd.DataFrame, outdir: str, tag: str | None) -> str:
    ensure_dir(outdir)
    fig, ax = plt.subplots(2, 1, figsize=(10, 8), sharex=True)

    for name in counts.columns:
        ax[0].plot(counts.index, counts[name], linewidth=1.8, label=str(name))
    ax[0].set_ylabel("Creatures")
    ax[0].legend(loc="best")
    ax[0].grid(alpha=0.25)

    ax[1].plot(events.index, events["infections"], color="tab:red", label="Infections")
    ax[1].plot(events.index, events["moves"], color="tab:blue", label="Hops")
    ax[1].set_xlabel("Round")
    ax[1].set_ylabel("Per round")
    ax[1].legend(loc="best")
    ax[1].grid(alpha=0.25)

    fig.tight_layout()
    png = os.path.join(outdir, f"species_rounds_{timestamp(tag)}.png")
    fig.savefig(png, dpi=160)
    plt.close(fig)
    print(f"[OK] Saved {png}")
    return png


def export_csv(df: pd.DataFrame, outdir: str, base: str, tag: str | None) -> str:
    ensure_dir(outdir)
    path = os.path.join(outdir, f"{base}_{timestamp(tag)}.csv")
    df.to_csv(path)
    print(f"[OK] Wrote {path}")
    return path


# ------------------------- main ------------------------------
def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--csv", type=str, default="runs/rounds.csv",
                    help="Census CSV written by darwin_sim")
    ap.add_argument("--outdir", type=str, default="reports",
                    help="Output directory for plots and exported CSVs")
    ap.add_argument("--tag", type=str, default="",
                    help="Optional label to append to filenames")
    ap.add_argument("--session", type=str, default="latest",
                    help="Session ID to analyze; 'latest' picks the most recent, '' keeps all")
    args = ap.parse_args(argv)

    df = filter_session(load_rounds(args.csv), args.session)
    print(f"[INFO] Rows after filter: {len(df)}")
    if len(df) == 0:
        print("[WARN] Nothing to analyze.")
        return 0

    counts = species_counts(df)
    export_csv(counts, args.outdir, base="species_counts", tag=(args.tag or None))
    plot_rounds(counts, round_events(df), args.outdir, tag=(args.tag or None))
    print(f"\nDone. Outputs are in: {args.outdir}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
