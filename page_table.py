from enum import Enum

from errors import InvalidAccessError, SimulationError


class AccessMode(Enum):
    READ = 'r'
    WRITE = 'w'

    @classmethod
    def from_char(cls, char):
        try:
            return cls(char)
        except ValueError:
            raise ValueError(f"Unknown access type: {char!r}") from None


class PageTableEntry:
    def __init__(self, virtual_page_num):
        self.virtual_page_num = virtual_page_num
        self.reset()

    def reset(self):
        self.frame = None  # None means not in memory
        self.mapped = False
        self.dirty = False
        self.reference = False
        self.last_access_mode = None  # Diagnostics only
        self.aging_counter = 0  # 8-bit, used by aging

    def is_valid(self):
        return self.mapped

    def __repr__(self):
        return (f"PageTableEntry(page={self.virtual_page_num}, frame={self.frame}, "
                f"ref={int(self.reference)}, dirty={int(self.dirty)}, "
                f"age={self.aging_counter:#04x})")


class PageTable:
    def __init__(self, num_pages):
        if num_pages <= 0:
            raise ValueError(f"num_pages must be positive, got {num_pages}")
        self.num_pages = num_pages
        self.entries = [PageTableEntry(i) for i in range(num_pages)]

    def get_entry(self, virtual_page_num):
        if not 0 <= virtual_page_num < self.num_pages:
            raise InvalidAccessError(virtual_page_num, self.num_pages)
        return self.entries[virtual_page_num]

    def is_resident(self, virtual_page_num):
        return self.get_entry(virtual_page_num).mapped

    def mark_resident(self, virtual_page_num, frame_num, access_mode):
        entry = self.get_entry(virtual_page_num)
        if entry.mapped:
            raise SimulationError(f"Page {virtual_page_num} is already resident in frame {entry.frame}")

        entry.frame = frame_num
        entry.mapped = True
        entry.reference = True
        if access_mode is AccessMode.WRITE:
            entry.dirty = True
        entry.last_access_mode = access_mode

    def evict(self, virtual_page_num):
        """Reset the entry to its non-resident defaults and return the freed frame."""
        entry = self.get_entry(virtual_page_num)
        if not entry.mapped:
            raise SimulationError(f"Page {virtual_page_num} is not resident")

        frame_num = entry.frame
        entry.reset()
        return frame_num

    def clear_all_reference_bits(self):
        for entry in self.entries:
            entry.reference = False

    def resident_pages(self):
        return [entry.virtual_page_num for entry in self.entries if entry.mapped]

    def mapped_count(self):
        return sum(1 for entry in self.entries if entry.mapped)
