import matplotlib

matplotlib.use('Agg')

import pytest  # noqa: E402

from page_table import AccessMode, PageTable  # noqa: E402


@pytest.fixture
def page_table():
    return PageTable(4)


def load(page_table, page_num, frame_num, reference=True, dirty=False):
    """Map a page directly, bypassing the simulator."""
    page_table.mark_resident(page_num, frame_num, AccessMode.WRITE if dirty else AccessMode.READ)
    page_table.get_entry(page_num).reference = reference
    return page_table.get_entry(page_num)


def write_trace(path, num_pages, num_frames, accesses):
    lines = [f"{num_pages} {num_frames}"]
    lines += [f"{page} {mode}" for page, mode in accesses]
    path.write_text("\n".join(lines) + "\n")
    return path
