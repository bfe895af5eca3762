#!/usr/bin/env python3
"""
Rolls out many possessions with a uniform random legal-action offense and
prints how they ended. Useful as a baseline for how hard generated
scenarios are at a given streak (defense mode).
"""
import argparse
from collections import Counter

import numpy as np
from tqdm import tqdm

from tsumeball.envs.tsume_env import TsumeBasketballEnv
from tsumeball.utils.wrappers import EpisodeStatsWrapper


def analyze_results(results: list, num_episodes: int):
    print("\n--- Evaluation Results ---")
    print(f"Total Episodes: {num_episodes}\n")

    lengths = [r["steps"] for r in results]
    print("Episode Length Stats:")
    print(f"  - Mean: {np.mean(lengths):.2f}")
    print(f"  - Std Dev: {np.std(lengths):.2f}")
    print(f"  - Min/Max: {min(lengths)}/{max(lengths)}\n")

    made_3pt = sum(r["made_3pt"] for r in results)
    made_layup = sum(r["made_layup"] for r in results)
    made_dunk = sum(r["made_dunk"] for r in results)
    total_points = sum(r["points"] for r in results)
    print(f"Made 3pts: {made_3pt}")
    print(f"Made Layups: {made_layup}")
    print(f"Made Dunks: {made_dunk}")
    print(f"Blocked shot attempts: {sum(r['blocked_shots'] for r in results)}")
    print(f"Passes: {sum(r['passes'] for r in results)}")
    print(f"PPP: {total_points / num_episodes:.3f}")

    print("\nEpisode Termination Breakdown:")
    outcomes = Counter(r["outcome"] for r in results)
    for outcome, count in sorted(outcomes.items()):
        percentage = 100.0 * count / num_episodes
        print(f"- {outcome}: {count}/{num_episodes} ({percentage:.2f}%)")


def main():
    parser = argparse.ArgumentParser(description="Evaluate a random legal-action offense.")
    parser.add_argument("--episodes", type=int, default=1000, help="Number of possessions to play.")
    parser.add_argument("--seed", type=int, default=0, help="Seed for scenarios and action choices.")
    parser.add_argument(
        "--streak", type=int, default=0,
        help="Streak fed to the defense (5 or more enables rim/arc denial)."
    )
    args = parser.parse_args()

    env = EpisodeStatsWrapper(TsumeBasketballEnv(seed=args.seed, carry_streak=False))
    rng = np.random.default_rng(args.seed)

    results = []
    for _ in tqdm(range(args.episodes), desc="Possessions"):
        obs, _ = env.reset(options={"streak": args.streak})
        done = False
        while not done:
            action = int(rng.choice(np.flatnonzero(obs["action_mask"])))
            obs, _, terminated, truncated, info = env.step(action)
            done = terminated or truncated
        results.append(info["episode_stats"])

    analyze_results(results, args.episodes)
    env.close()


if __name__ == "__main__":
    main()
