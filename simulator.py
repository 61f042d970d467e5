import argparse
import sys

from errors import InvalidAccessError, SimulationError, TraceFormatError
from memory_manager import PhysicalMemory, Statistics
from page_table import AccessMode, PageTable
from policies import ALGORITHMS, EvictionPolicy

# Accesses between reference bit sweeps
DEFAULT_CLOCK_FREQUENCY = 200


class VirtualMemorySimulator:

    def __init__(self, num_pages, num_frames, algorithm='fifo',
                 clock_freq=DEFAULT_CLOCK_FREQUENCY, random_seed=None):
        if not isinstance(clock_freq, int) or clock_freq <= 0:
            raise ValueError(f"clock_freq must be a positive integer, got {clock_freq!r}")

        self.page_table = PageTable(num_pages)
        self.physical_memory = PhysicalMemory(num_frames)
        self.policy = EvictionPolicy(algorithm, num_pages, random_seed)
        self.stats = Statistics()
        self.clock_freq = clock_freq
        self.current_time = 0
        self.last_accessed_page = None

    @property
    def algorithm(self):
        return self.policy.name

    @property
    def num_pages(self):
        return self.page_table.num_pages

    @property
    def num_frames(self):
        return self.physical_memory.num_frames

    @property
    def page_faults(self):
        return self.stats.page_faults

    def access(self, page_num, access_mode):
        """Process one memory reference. Returns True on a page fault."""
        if not 0 <= page_num < self.num_pages:
            raise InvalidAccessError(page_num, self.num_pages)
        if not isinstance(access_mode, AccessMode):
            access_mode = AccessMode.from_char(access_mode)

        self.current_time += 1
        entry = self.page_table.get_entry(page_num)

        if entry.is_valid():
            # Page hit
            entry.reference = True
            if access_mode is AccessMode.WRITE:
                entry.dirty = True
            entry.last_access_mode = access_mode
            self.stats.record_hit()
            fault = False
        else:
            self.handle_page_fault(page_num, access_mode)
            fault = True

        self.last_accessed_page = page_num

        if self.current_time % self.clock_freq == 0:
            self.page_table.clear_all_reference_bits()

        return fault

    def handle_page_fault(self, page_num, access_mode):
        state = self.policy.state

        if self.physical_memory.has_free_frame():
            frame_num = self.physical_memory.allocate_free_frame()
            if state.next_victim_frame is None:
                state.next_victim_frame = frame_num
            self.stats.record_page_fault()
        else:
            frame_num, is_dirty = self.evict_victim()
            self.stats.record_page_fault(evicted=True, is_dirty_replacement=is_dirty)

        self.page_table.mark_resident(page_num, frame_num, access_mode)

    def evict_victim(self):
        resident_pages = self.page_table.resident_pages()
        victim = self.policy.select_victim(
            self.page_table, resident_pages, self.last_accessed_page, self.num_frames)

        if victim is None or not 0 <= victim < self.num_pages:
            raise SimulationError(f"{self.algorithm} returned invalid victim {victim!r}")
        entry = self.page_table.get_entry(victim)
        if not entry.mapped:
            raise SimulationError(f"{self.algorithm} returned non-resident page {victim}")
        if not 0 <= entry.frame < self.num_frames:
            raise SimulationError(f"Page {victim} maps to invalid frame {entry.frame}")

        # Every policy keeps the FIFO ordering up to date
        self.policy.state.advance_fifo(self.num_frames)

        is_dirty = entry.dirty
        # The frame stays occupied; it goes straight to the faulting page
        frame_num = self.page_table.evict(victim)
        return frame_num, is_dirty

    def run(self, accesses):
        for page_num, access_mode in accesses:
            self.access(page_num, access_mode)
        return self.page_faults

    def check_invariants(self):
        mapped = self.page_table.mapped_count()
        occupied = self.physical_memory.occupied_count()
        if mapped != occupied or occupied > self.num_frames:
            raise SimulationError(
                f"{mapped} mapped pages but {occupied} occupied frames of {self.num_frames}")


def parse_header(line, line_num=1):
    parts = line.split()
    if len(parts) != 2:
        raise TraceFormatError(f"expected '<num_pages> <num_frames>', got {line.strip()!r}", line_num)
    try:
        num_pages, num_frames = int(parts[0]), int(parts[1])
    except ValueError:
        raise TraceFormatError(f"non-integer header {line.strip()!r}", line_num) from None
    if num_pages <= 0 or num_frames <= 0:
        raise TraceFormatError(f"page and frame counts must be positive, got {num_pages} {num_frames}", line_num)
    return num_pages, num_frames


def parse_access(line, line_num):
    parts = line.split()
    if len(parts) != 2:
        raise TraceFormatError(f"expected '<page> <r|w>', got {line.strip()!r}", line_num)
    try:
        page_num = int(parts[0])
    except ValueError:
        raise TraceFormatError(f"non-integer page {parts[0]!r}", line_num) from None
    try:
        access_mode = AccessMode.from_char(parts[1])
    except ValueError as e:
        raise TraceFormatError(str(e), line_num) from None
    return page_num, access_mode


def parse_trace(stream):
    """Read the header and return (num_pages, num_frames, accesses).

    accesses is a lazy iterator over (page, AccessMode) pairs, so the
    trace is consumed one line at a time.
    """
    lines = enumerate(stream, 1)
    for line_num, line in lines:
        if line.strip():
            num_pages, num_frames = parse_header(line, line_num)
            break
    else:
        raise TraceFormatError("missing '<num_pages> <num_frames>' header")

    def accesses():
        for line_num, line in lines:
            if line.strip():
                yield parse_access(line, line_num)

    return num_pages, num_frames, accesses()


def run_trace(stream, algorithm, clock_freq=DEFAULT_CLOCK_FREQUENCY, random_seed=None, verbose=False):
    num_pages, num_frames, accesses = parse_trace(stream)
    simulator = VirtualMemorySimulator(num_pages, num_frames, algorithm=algorithm,
                                       clock_freq=clock_freq, random_seed=random_seed)

    if verbose:
        print(f"\n{'='*60}", file=sys.stderr)
        print(f"Running {simulator.algorithm} algorithm: {num_pages} pages, "
              f"{num_frames} frames, clock every {clock_freq}", file=sys.stderr)
        print(f"{'='*60}", file=sys.stderr)

    simulator.run(accesses)

    if verbose:
        print("\nResults:", file=sys.stderr)
        print(simulator.stats, file=sys.stderr)
        print(f"{'='*60}\n", file=sys.stderr)

    return simulator, simulator.stats


def run_simulation(filename, algorithm, clock_freq=DEFAULT_CLOCK_FREQUENCY, random_seed=None, verbose=False):
    with open(filename, 'r') as f:
        return run_trace(f, algorithm, clock_freq=clock_freq, random_seed=random_seed, verbose=verbose)


class ArgumentParser(argparse.ArgumentParser):
    # Usage errors exit with status 1
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def positive_int(value):
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Error parsing: {value}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return number


def build_parser():
    parser = ArgumentParser(
        prog='vmsim',
        description='Replay a page reference trace and count page faults.')
    parser.add_argument('algorithm', choices=ALGORITHMS, help='Page replacement algorithm')
    parser.add_argument('clock_freq', type=positive_int,
                        help='Accesses between reference bit sweeps')
    parser.add_argument('trace', nargs='?', help='Trace file (default: standard input)')
    parser.add_argument('--seed', type=int, default=None, help='Seed for the random algorithm')
    parser.add_argument('-v', '--verbose', action='store_true', help='Print statistics to stderr')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        if args.trace is None:
            simulator, _ = run_trace(sys.stdin, args.algorithm, args.clock_freq, args.seed, args.verbose)
        else:
            simulator, _ = run_simulation(args.trace, args.algorithm, args.clock_freq, args.seed, args.verbose)
    except (OSError, ValueError, SimulationError) as e:
        print(f"vmsim: {e}", file=sys.stderr)
        return 1

    print(simulator.page_faults)
    return 0


if __name__ == '__main__':
    sys.exit(main())
