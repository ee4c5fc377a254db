DAYS = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday']
PERIODS_PER_DAY = 6
SLOTS_PER_WEEK = len(DAYS) * PERIODS_PER_DAY


def slot_cells():
    """Every (day, period) cell of the week, Monday 1..6 first, then Tuesday, and so on."""
    cells = []
    for day in DAYS:
        for period in range(1, PERIODS_PER_DAY + 1):
            cells.append((day, period))
    return cells


def empty_grid():
    return {day: {period: [] for period in range(1, PERIODS_PER_DAY + 1)} for day in DAYS}


def place_sections(sections, coloring, colors_count):
    """
    Map each section's color onto the weekly grid.
    Color c goes to cell c % SLOTS_PER_WEEK, so a schedule needing more than a
    week's worth of slots wraps around and the overflow is reported in warnings.
    Returns (grid, warnings) where grid is {day: {period: [entry, ...]}}.
    """
    cells = slot_cells()
    grid = empty_grid()
    warnings = []

    if colors_count > SLOTS_PER_WEEK:
        warnings.append(
            f"Schedule requires {colors_count} time slots, which exceeds the "
            f"{SLOTS_PER_WEEK} slots available in a standard week."
        )

    for s in sections:
        color = coloring.get(s.id)
        if color is None:
            warnings.append(f"Section {s.name or s.id} has no slot assigned")
            continue

        day, period = cells[color % SLOTS_PER_WEEK]
        entry = s.to_dict()
        entry['slot'] = color
        grid[day][period].append(entry)

    return grid, warnings


def grid_to_json(grid):
    """Period keys as strings, the way MongoDB and JSON store them."""
    return {day: {str(p): entries for p, entries in periods.items()} for day, periods in grid.items()}
