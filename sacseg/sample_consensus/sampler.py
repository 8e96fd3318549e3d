"""Progressive sampling schedule for PROSAC."""

import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from sacseg.exceptions import SamplingExhaustion
from .model import SampleConsensusModel

# Upper bound on the number of trials of classic RANSAC
MAX_TRIALS = 200000


@dataclass
class RunContext:
    """
    Mutable state of a single PROSAC run.

    Names follow Chum & Matas, "Matching with PROSAC" (CVPR 2005):
    ``n`` is the pool size, ``T_n``/``T_prime_n`` the growth schedule,
    ``n_star``/``I_n_star``/``epsilon_n_star`` the best non-random prefix and
    ``k_n_star`` the live trial budget. Scheduler ratios are float32.
    """
    N: int
    m: int
    T_N: np.float32
    T_n: np.float32
    T_prime_n: np.float32
    n: int
    n_star: int
    I_n_star: int = 0
    epsilon_n_star: np.float32 = np.float32(0.0)
    k_n_star: int = MAX_TRIALS
    I_N_best: int = 0
    iterations: int = 0
    pool: np.ndarray = field(default_factory=lambda: np.array([], dtype=np.int64))

    @property
    def pool_view(self) -> np.ndarray:
        """The first ``n`` pool entries, the indices currently sampled from."""
        return self.pool[:self.n]

    @classmethod
    def create(cls, indices: np.ndarray, m: int, max_trials: int = MAX_TRIALS) -> 'RunContext':
        """Initial schedule for ``N = len(indices)`` observations and sample size ``m``."""
        N = len(indices)
        T_N = np.float32(max_trials)
        # Expected trials before a uniform sample lies entirely in the first m entries
        T_n = T_N
        for i in range(m):
            T_n *= np.float32(m - i) / np.float32(N - i)

        # Preallocated for every index, only the first n entries are admitted
        pool = np.zeros(N, dtype=np.int64)
        pool[:m] = indices[:m]

        return cls(
            N=N,
            m=m,
            T_N=T_N,
            T_n=np.float32(T_n),
            T_prime_n=np.float32(1.0),
            n=m,
            n_star=N,
            k_n_star=int(max_trials),
            pool=pool,
        )


class ProgressiveSampler:
    """Draws PROSAC samples from a growing prefix of the index sequence."""

    def __init__(self, model: SampleConsensusModel, rng: np.random.Generator):
        self.model = model
        self.rng = rng

    def grow(self, ctx: RunContext) -> bool:
        """Admit the next index into the pool. False once the sequence is used up."""
        ctx.n += 1
        if ctx.n > ctx.N:
            ctx.n = ctx.N
            return False

        ctx.pool[ctx.n - 1] = self.model.indices[ctx.n - 1]
        T_n_minus_1 = ctx.T_n
        ctx.T_n = np.float32(ctx.T_n * np.float32(ctx.n + 1) / np.float32(ctx.n + 1 - ctx.m))
        ctx.T_prime_n = np.float32(ctx.T_prime_n + np.float32(math.ceil(ctx.T_n - T_n_minus_1)))
        return True

    def sample(self, ctx: RunContext, trial_index: int) -> np.ndarray:
        """Draw ``m`` indices from the pool, forcing in the newest entry when due."""
        selection = self.model.get_samples(ctx.pool_view, self.rng)
        if len(selection) == 0:
            raise SamplingExhaustion("No samples could be selected from a pool of %d" % ctx.n)

        if ctx.T_prime_n < trial_index:
            newest = ctx.pool[ctx.n - 1]
            if newest not in selection:
                selection = selection.copy()
                selection[-1] = newest
        return selection

    def advance_and_sample(self, ctx: RunContext, trial_index: int) -> Optional[np.ndarray]:
        """
        Run the growth step for ``trial_index`` and draw its sample.

        Growth happens strictly before the forced-inclusion check, so a trial
        that triggers growth compares against the updated ``T_prime_n``.

        Returns:
            The selection, or None when the pool would grow past ``N``

        Raises:
            SamplingExhaustion: no valid subset could be drawn from the pool
        """
        if trial_index == ctx.T_prime_n and ctx.n < ctx.n_star:
            if not self.grow(ctx):
                return None
        return self.sample(ctx, trial_index)
