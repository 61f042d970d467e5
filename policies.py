import random
from enum import Enum

from errors import SimulationError


class Policy(Enum):
    FIFO = 'fifo'
    SECOND_CHANCE = 'second_chance'
    NRU = 'nru'
    AGING = 'aging'
    MFU = 'mfu'
    RANDOM = 'random'

    @classmethod
    def from_name(cls, name):
        if isinstance(name, cls):
            return name
        try:
            return cls(name.lower())
        except ValueError:
            raise ValueError(f"Unknown algorithm: {name}") from None


ALGORITHMS = [policy.value for policy in Policy]

AGING_HIGH_BIT = 7
AGING_MASK = 0xFF


class PolicyState:
    """Auxiliary state an eviction policy keeps across calls within one run."""

    def __init__(self, num_pages, random_seed=None):
        # Frame loaded earliest that is still resident; set on first allocation
        self.next_victim_frame = None
        self.usage_counts = [0] * num_pages  # For MFU
        self.rng = random.Random(random_seed)

    def advance_fifo(self, num_frames):
        self.next_victim_frame = (self.next_victim_frame + 1) % num_frames


class EvictionPolicy:

    def __init__(self, algorithm, num_pages, random_seed=None):
        self.policy = Policy.from_name(algorithm)
        self.state = PolicyState(num_pages, random_seed)

    @property
    def name(self):
        return self.policy.value

    def select_victim(self, page_table, resident_pages, last_accessed_page, num_frames):
        """Return the resident page to evict.

        resident_pages must be non-empty and in ascending page order; every
        tie-break below relies on that order.
        """
        if not resident_pages:
            raise SimulationError("Eviction requested with no resident pages")

        if self.policy is Policy.FIFO:
            return self.select_victim_fifo(page_table, resident_pages)
        elif self.policy is Policy.SECOND_CHANCE:
            return self.select_victim_second_chance(page_table, resident_pages, num_frames)
        elif self.policy is Policy.NRU:
            return self.select_victim_nru(page_table, resident_pages)
        elif self.policy is Policy.AGING:
            return self.select_victim_aging(page_table, resident_pages)
        elif self.policy is Policy.MFU:
            return self.select_victim_mfu(resident_pages, last_accessed_page)
        elif self.policy is Policy.RANDOM:
            return self.select_victim_random(page_table)
        else:
            raise ValueError(f"Unknown algorithm: {self.policy}")

    def select_victim_fifo(self, page_table, resident_pages):
        for page_num in resident_pages:
            if page_table.get_entry(page_num).frame == self.state.next_victim_frame:
                return page_num

        # Cursor out of sync with the table; fall back to the lowest page
        return resident_pages[0]

    def select_victim_second_chance(self, page_table, resident_pages, num_frames):
        page_in_frame = {page_table.get_entry(page_num).frame: page_num for page_num in resident_pages}
        current_frame = self.state.next_victim_frame

        for _ in range(2 * page_table.num_pages):
            page_num = page_in_frame.get(current_frame)
            if page_num is None:
                continue
            entry = page_table.get_entry(page_num)
            if not entry.reference:
                return page_num
            entry.reference = False
            current_frame = (current_frame + 1) % num_frames

        raise SimulationError("Second chance scan found no victim")

    def select_victim_nru(self, page_table, resident_pages):
        # Class = (reference << 1) | dirty; lower class is evicted first
        candidates = [None] * 4

        for page_num in resident_pages:
            entry = page_table.get_entry(page_num)
            class_id = (int(entry.reference) << 1) | int(entry.dirty)
            if candidates[class_id] is None:
                candidates[class_id] = page_num
                if class_id == 0:
                    break

        for page_num in candidates:
            if page_num is not None:
                return page_num

    def select_victim_aging(self, page_table, resident_pages):
        victim = None
        min_age = AGING_MASK + 1

        for page_num in resident_pages:
            entry = page_table.get_entry(page_num)
            entry.aging_counter >>= 1
            entry.aging_counter |= int(entry.reference) << AGING_HIGH_BIT
            entry.aging_counter &= AGING_MASK
            if entry.aging_counter < min_age:
                min_age = entry.aging_counter
                victim = page_num

        return victim

    def select_victim_mfu(self, resident_pages, last_accessed_page):
        usage_counts = self.state.usage_counts
        if last_accessed_page is not None:
            usage_counts[last_accessed_page] += 1

        victim = None
        max_count = -1
        for page_num in resident_pages:
            if usage_counts[page_num] > max_count:
                max_count = usage_counts[page_num]
                victim = page_num

        return victim

    def select_victim_random(self, page_table):
        rng = self.state.rng
        page_num = rng.randrange(page_table.num_pages)
        while not page_table.is_resident(page_num):
            page_num = rng.randrange(page_table.num_pages)
        return page_num
