# Module for randomized request pacing and client identity selection

import random
import time
import logging

import constants # Import constants


class Pacer:
    """
    Source of every randomized choice the collector makes: inter-request
    delays, user agents and scroll steps. Pass a seed (or a random.Random)
    for reproducible sequences and a sleep function to avoid real waiting.
    """

    def __init__(self, min_delay_ms=constants.DEFAULT_MIN_DELAY_MS, max_delay_ms=constants.DEFAULT_MAX_DELAY_MS,
                 user_agents=None, seed=None, rng=None, sleep=time.sleep):
        if min_delay_ms < 0 or max_delay_ms < min_delay_ms:
            raise ValueError(f"Invalid delay bounds: {min_delay_ms}-{max_delay_ms} ms")
        self.min_delay_ms = min_delay_ms
        self.max_delay_ms = max_delay_ms
        self.user_agents = list(user_agents or constants.USER_AGENTS)
        self._rng = rng or random.Random(seed)
        self._sleep = sleep

    @classmethod
    def from_config(cls, config, sleep=time.sleep):
        return cls(
            min_delay_ms=config['min_delay_ms'],
            max_delay_ms=config['max_delay_ms'],
            seed=config.get('random_seed'),
            sleep=sleep,
        )

    def next_delay_ms(self):
        return self._rng.uniform(self.min_delay_ms, self.max_delay_ms)

    def wait(self):
        """Sleeps for a random delay within the bounds. Returns the delay in seconds."""
        delay = self.next_delay_ms() / 1000.0
        logging.debug(f"Pacing: sleeping {delay:.2f}s")
        self._sleep(delay)
        return delay

    def choose_user_agent(self):
        return self._rng.choice(self.user_agents)

    def scroll_plan(self, page_height, viewport_height):
        """
        Returns a list of (scroll_y, pause_ms) steps: downward steps of
        30-70% of a viewport until 70% of the page, then one step back up
        to 30% of the furthest position.
        """
        steps = []
        if page_height <= 0 or viewport_height <= 0:
            return steps
        position = 0.0
        target = page_height * 0.7
        while position < target:
            position += viewport_height * (0.3 + self._rng.random() * 0.4)
            steps.append((int(position), int(100 + self._rng.random() * 200)))
        if steps:
            steps.append((int(position * 0.3), int(100 + self._rng.random() * 200)))
        return steps
