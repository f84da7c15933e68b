"""
Policy Evaluation Script

This script follows the greedy policy of a trained model from every start state
and reports how many steps it takes to reach a goal state.
By default it samples experience from the bundled gridworld, trains a model on it,
and evaluates the resulting policy.

Usage:
    python -m replayq.rl.evaluate --n 1000 --iter 50 --alpha 0.1 --gamma 0.5
"""

import json
import argparse
from datetime import datetime

import numpy as np

from replayq.environment import gridworld_environment, GRIDWORLD_STATES, GRIDWORLD_ACTIONS
from replayq.rl.config import (
    CONTROL, SAMPLING, EVALUATION, Control, check_positive_int, ensure_output_dirs
)
from replayq.rl.sample import sample_experience, unpack_response
from replayq.rl.train import train_replay


def _rollout(model, env, start_state, goal_states, max_steps, gamma):
    """Follow the greedy policy from one start state."""
    state = start_state
    steps = 0
    episode_reward = 0.0
    path = [state]

    while state not in goal_states and steps < max_steps:
        action = model.policy_action(state)
        if action is None:
            # No policy known for this state
            break
        next_state, reward = unpack_response(env(state, action), state, action)

        # Apply discounting
        episode_reward += (gamma ** steps) * reward
        steps += 1
        state = next_state
        path.append(state)

    return {
        "start_state": start_state,
        "steps": steps,
        "reward": episode_reward,
        "reached_goal": state in goal_states,
        "path": path,
    }


def evaluate_policy(model, env, start_states, goal_states, max_steps=None, gamma=1.0, verbose=False):
    """
    Evaluate the greedy policy of a model.

    Args:
        model: Trained Model
        env: Environment function env(state, action) -> (next_state, reward)
        start_states: States to start rollouts from
        goal_states: States that end a rollout
        max_steps: Maximum steps per rollout
        gamma: Discount applied to the rollout reward
        verbose: Whether to print the results

    Returns:
        Dictionary with per-state results and summary statistics
    """
    max_steps = max_steps if max_steps is not None else EVALUATION["max_steps"]
    check_positive_int("max_steps", max_steps)
    goal_states = set(goal_states)

    results = [_rollout(model, env, state, goal_states, max_steps, gamma) for state in start_states]

    steps = [result["steps"] for result in results]
    rewards = [result["reward"] for result in results]
    reached = [result["reached_goal"] for result in results]

    summary = {
        "num_start_states": len(results),
        "max_steps": max_steps,
        "average_steps": float(np.mean(steps)) if steps else 0.0,
        "std_steps": float(np.std(steps)) if steps else 0.0,
        "average_reward": float(np.mean(rewards)) if rewards else 0.0,
        "std_reward": float(np.std(rewards)) if rewards else 0.0,
        "success_rate": float(np.mean(reached)) if reached else 0.0,
        "state_results": results,
    }

    if verbose:
        for result in results:
            status = "reached goal" if result["reached_goal"] else "did not reach goal"
            print(f"  {result['start_state']}: {status} in {result['steps']} steps "
                  f"({' -> '.join(map(str, result['path']))})")
        print(f"Average Steps: {summary['average_steps']:.2f} ± {summary['std_steps']:.2f}")
        print(f"Average Reward: {summary['average_reward']:.4f} ± {summary['std_reward']:.4f}")
        print(f"Success Rate: {summary['success_rate']:.2%}")

    return summary


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Train on sampled gridworld experience and evaluate the greedy policy")
    parser.add_argument("--n", type=int, default=SAMPLING["n"], help="Number of transitions to sample")
    parser.add_argument("--seed", type=int, default=SAMPLING["sampling_seed"], help="Sampling seed")
    parser.add_argument("--alpha", type=float, default=CONTROL["alpha"], help="Learning rate")
    parser.add_argument("--gamma", type=float, default=CONTROL["gamma"], help="Discount factor")
    parser.add_argument("--iter", type=int, default=CONTROL["iter"], help="Number of replay passes")
    parser.add_argument("--max_steps", type=int, default=EVALUATION["max_steps"], help="Maximum steps per rollout")
    args = parser.parse_args()

    paths = ensure_output_dirs()

    experience = sample_experience(args.n, gridworld_environment, GRIDWORLD_STATES, GRIDWORLD_ACTIONS,
                                   seed=args.seed, verbose=True)
    control = Control(alpha=args.alpha, gamma=args.gamma, iter=args.iter)
    model = train_replay(experience, control=control, verbose=True)
    print(model.summary())
    print()

    start_states = [state for state in GRIDWORLD_STATES if state not in EVALUATION["goal_states"]]
    summary = evaluate_policy(model, gridworld_environment, start_states, EVALUATION["goal_states"],
                              max_steps=args.max_steps, verbose=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    results_file = f"{paths['results']}/policy_evaluation_{timestamp}.json"
    with open(results_file, 'w') as f:
        json.dump(summary, f, indent=2, default=str)
    print(f"Results saved to {results_file}")
