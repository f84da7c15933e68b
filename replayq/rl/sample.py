"""
Experience Sampling Script

This script rolls out an environment function to generate transition tuples
(State, Action, Reward, NextState) that can be fed straight back into training.
Each step starts from a state drawn uniformly and independently from the state
universe; actions come from a random, greedy or epsilon-greedy agent.

Usage:
    python -m replayq.rl.sample --n 1000 --output outputs/experience/gridworld.csv
"""

import os
import math
import numbers
import argparse
from collections.abc import Mapping

import numpy as np
import pandas as pd
from tqdm import tqdm

from replayq.environment import gridworld_environment, GRIDWORLD_STATES, GRIDWORLD_ACTIONS
from replayq.rl.algorithms.random_agent import RandomAgent
from replayq.rl.algorithms.greedy_agent import GreedyAgent
from replayq.rl.algorithms.epsilon_greedy_agent import EpsilonGreedyAgent
from replayq.rl.config import Control, SAMPLING, TRAINING, check_positive_int, ensure_output_dirs
from replayq.rl.errors import EnvironmentContractError, InvalidConfigurationError

# Column names of the sampled table, identical to the training defaults
SAMPLE_COLUMNS = [
    TRAINING["state_col"],
    TRAINING["action_col"],
    TRAINING["reward_col"],
    TRAINING["next_state_col"],
]


def create_agent(action_selection, actions, model=None, epsilon=None, agent_seed=None):
    """
    Create an action selection agent by strategy name.

    Args:
        action_selection: 'random', 'greedy' or 'epsilon-greedy'
        actions: Action universe
        model: Model whose policy drives the greedy strategies (optional)
        epsilon: Exploration rate for 'epsilon-greedy'
        agent_seed: Seed for the agent's internal randomness
    """
    policy = model.policy if model is not None else None
    name = str(action_selection).lower().replace("_", "-")
    if name == 'random':
        return RandomAgent(actions, agent_seed=agent_seed)
    elif name == 'greedy':
        return GreedyAgent(actions, policy, agent_seed=agent_seed)
    elif name == 'epsilon-greedy':
        return EpsilonGreedyAgent(actions, policy, epsilon=epsilon, agent_seed=agent_seed)
    else:
        raise InvalidConfigurationError(
            f"Unknown action selection: {action_selection}. Supported: 'random', 'greedy', 'epsilon-greedy'"
        )


def unpack_response(response, state, action):
    """
    Check the environment's response and return (next_state, reward).

    The environment may return a (next_state, reward) pair or a mapping with
    'next_state' and 'reward' keys.
    """
    if isinstance(response, Mapping):
        missing = [key for key in ("next_state", "reward") if key not in response]
        if missing:
            raise EnvironmentContractError(
                f"Environment response for state={state!r}, action={action!r} is missing {', '.join(missing)}",
                state, action)
        next_state, reward = response["next_state"], response["reward"]
    elif isinstance(response, (tuple, list)) and len(response) == 2:
        next_state, reward = response
    else:
        raise EnvironmentContractError(
            f"Environment must return (next_state, reward) for state={state!r}, action={action!r}, "
            f"got {response!r}", state, action)

    if next_state is None or (pd.api.types.is_scalar(next_state) and pd.isna(next_state)):
        raise EnvironmentContractError(
            f"Environment returned no next state for state={state!r}, action={action!r}", state, action)
    if isinstance(reward, bool) or not isinstance(reward, numbers.Real) or math.isnan(reward):
        raise EnvironmentContractError(
            f"Environment returned a non-numeric reward {reward!r} for state={state!r}, action={action!r}",
            state, action)

    return next_state, float(reward)


def sample_experience(n, env, states, actions, model=None, action_selection=None,
                      control=None, seed=None, verbose=False):
    """
    Generate `n` transition tuples by calling the environment function.

    Args:
        n: Number of tuples to generate (>= 1)
        env: Callable env(state, action) -> (next_state, reward) or
            {'next_state': ..., 'reward': ...}
        states: State universe from which start states are drawn uniformly
        actions: Action universe
        model: Optional Model whose policy drives greedy / epsilon-greedy selection
        action_selection: 'random' (default), 'greedy' or 'epsilon-greedy'
        control: Control or dict; its epsilon is used by 'epsilon-greedy'
        seed: Seed from which the start state and agent generators are derived
        verbose: Whether to print progress

    Returns:
        DataFrame with columns State, Action, Reward, NextState in generation order

    Raises:
        InvalidConfigurationError before any environment call if the parameters are invalid,
        EnvironmentContractError at the first call whose response violates the contract
    """
    check_positive_int("n", n)
    control = Control.coerce(control)
    states = list(states)
    actions = list(actions)
    if not states:
        raise InvalidConfigurationError("The state universe must not be empty")
    if not actions:
        raise InvalidConfigurationError("The action universe must not be empty")
    action_selection = action_selection if action_selection is not None else SAMPLING["action_selection"]
    seed = seed if seed is not None else SAMPLING["sampling_seed"]

    # Generate deterministic seeds derived from the sampling seed
    state_seed, agent_seed = np.random.default_rng(seed).integers(0, 2**32 - 1, size=2)
    state_rng = np.random.default_rng(int(state_seed))
    agent = create_agent(action_selection, actions, model=model,
                         epsilon=control.epsilon, agent_seed=int(agent_seed))

    if verbose:
        print(f"Sampling {n} transitions with '{action_selection}' action selection "
              f"over {len(states)} states and {len(actions)} actions")

    rows = []
    for _ in tqdm(range(n), disable=not verbose):
        state = states[state_rng.integers(0, len(states))]
        action = agent.act(state)
        next_state, reward = unpack_response(env(state, action), state, action)
        rows.append((state, action, reward, next_state))

    return pd.DataFrame(rows, columns=SAMPLE_COLUMNS)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Sample experience from the gridworld environment")
    parser.add_argument("--n", type=int, default=SAMPLING["n"], help="Number of transitions to sample")
    parser.add_argument("--seed", type=int, default=SAMPLING["sampling_seed"], help="Sampling seed")
    parser.add_argument("--output", type=str, default=None, help="CSV file to write (default: outputs/experience/gridworld.csv)")
    args = parser.parse_args()

    output = args.output
    if output is None:
        paths = ensure_output_dirs()
        output = os.path.join(paths["experience"], "gridworld.csv")
    else:
        os.makedirs(os.path.dirname(output) or ".", exist_ok=True)

    experience = sample_experience(args.n, gridworld_environment, GRIDWORLD_STATES, GRIDWORLD_ACTIONS,
                                   seed=args.seed, verbose=True)
    experience.to_csv(output, index=False)
    print(f"Saved {len(experience)} transitions to {output}")
