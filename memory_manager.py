from errors import SimulationError


class PhysicalMemory:
    def __init__(self, num_frames=32):
        if num_frames <= 0:
            raise ValueError(f"num_frames must be positive, got {num_frames}")
        self.num_frames = num_frames
        # False means free; which page owns a frame lives in the page table
        self.frames = [False] * num_frames
        self.num_free_frames = num_frames
        self.prev_free = -1  # Last frame handed out

    def has_free_frame(self):
        return self.num_free_frames > 0

    def allocate_free_frame(self):
        """Hand out the next free frame, searching circularly after the last one returned."""
        if self.num_free_frames == 0:
            raise SimulationError("No free frame to allocate")

        frame_num = (self.prev_free + 1) % self.num_frames
        while self.frames[frame_num]:
            frame_num = (frame_num + 1) % self.num_frames

        self.frames[frame_num] = True
        self.num_free_frames -= 1
        self.prev_free = frame_num
        return frame_num

    def release(self, frame_num):
        if not self.frames[frame_num]:
            raise SimulationError(f"Frame {frame_num} is already free")
        self.frames[frame_num] = False
        self.num_free_frames += 1

    def is_occupied(self, frame_num):
        return self.frames[frame_num]

    def occupied_count(self):
        return self.num_frames - self.num_free_frames

    def is_full(self):
        return not self.has_free_frame()


class Statistics:
    def __init__(self):
        self.accesses = 0
        self.hits = 0
        self.page_faults = 0
        self.evictions = 0
        self.disk_accesses = 0
        self.dirty_writes = 0

    def record_hit(self):
        self.accesses += 1
        self.hits += 1

    def record_page_fault(self, evicted=False, is_dirty_replacement=False):
        self.accesses += 1
        self.page_faults += 1
        if evicted:
            self.evictions += 1
        if is_dirty_replacement:
            # Dirty page: write back + read new page
            self.disk_accesses += 2
            self.dirty_writes += 1
        else:
            # Clean page: just read new page
            self.disk_accesses += 1

    @property
    def fault_rate(self):
        if self.accesses == 0:
            return 0.0
        return self.page_faults / self.accesses

    def as_dict(self):
        return {
            'page_faults': self.page_faults,
            'evictions': self.evictions,
            'dirty_writes': self.dirty_writes,
            'disk_accesses': self.disk_accesses,
        }

    def __str__(self):
        return (f"Accesses: {self.accesses}\n"
                f"Hits: {self.hits}\n"
                f"Page Faults: {self.page_faults} ({self.fault_rate:.2%})\n"
                f"Evictions: {self.evictions}\n"
                f"Disk Accesses: {self.disk_accesses}\n"
                f"Dirty Writes: {self.dirty_writes}")
