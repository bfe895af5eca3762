#!/usr/bin/env python3
"""
Generates a GIF of a single Tsume Basketball possession.

The offense picks uniformly among legal actions. Each step is logged to the
console and the frames are saved as a GIF.
"""
import argparse

import imageio
import numpy as np

import tsumeball
from tsumeball.envs.core.actions import ActionType


def main():
    """Main function to run the visualization."""
    parser = argparse.ArgumentParser(
        description="Visualize a single Tsume Basketball possession.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--seed", type=int, default=0, help="Seed for the scenario and the action choices.")
    parser.add_argument(
        "--mode", type=str, default="streak-attack", choices=["streak-attack", "time-attack"],
        help="Game mode shown in the opening message."
    )
    parser.add_argument(
        "--streak", type=int, default=0,
        help="Starting streak. 5 or more switches the defense to rim/arc denial."
    )
    parser.add_argument(
        "--loop", type=int, default=0,
        help="How many times the GIF should loop (0 for infinite)."
    )
    parser.add_argument(
        "--save-name", type=str, default="visualized_possession.gif",
        help="Filename for the output GIF."
    )
    args = parser.parse_args()

    print("Setting up environment...")
    env = tsumeball.TsumeBasketballEnv(mode=args.mode, seed=args.seed, render_mode="rgb_array")
    rng = np.random.default_rng(args.seed)

    obs, info = env.reset(options={"streak": args.streak})
    done = False
    frames = []

    print("\n--- Running Possession Visualization ---")
    print(env.board_text())

    while not done:
        frames.append(env.render())

        legal = np.flatnonzero(obs["action_mask"])
        action = ActionType(int(rng.choice(legal)))
        acting = info.get("acting_unit") or "carrier"

        obs, reward, done, _, info = env.step(action.value)

        print(f"[{info['phase']}] {acting}: {action.name} -> {info['message']}")
        if info.get("last_result") and action == ActionType.SHOOT:
            result = info["last_result"]
            outcome = "MAKES" if result["success"] else "MISSES"
            print(f"  SHOT: {outcome} ({result['type'] or result['reason']}), reward {reward}")

        if done:
            print(f"Possession over. Outcome: {info['outcome']}, score {info['score']}, streak {info['streak']}")

    frames.append(env.render())

    print(f"\nSaving possession animation to {args.save_name}...")
    imageio.mimsave(args.save_name, frames, fps=2, loop=args.loop)
    print("Done.")

    env.close()


if __name__ == "__main__":
    main()
