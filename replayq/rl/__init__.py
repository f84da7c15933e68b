"""
Reinforcement Learning module of replayq.

This module contains all components related to learning from recorded experience,
including the value table and model, the replay and action selection agents,
training, sampling and evaluation utilities.
"""
