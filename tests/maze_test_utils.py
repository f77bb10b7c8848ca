from collections import deque

# Direction deltas duplicated here so the checks stay independent of the
# package under test. North is y - 1.
DELTAS = {
    "north": (0, -1),
    "south": (0, 1),
    "east": (1, 0),
    "west": (-1, 0),
}
OPPOSITE = {"north": "south", "south": "north", "east": "west", "west": "east"}


def grid_neighbors(grid):
    """Return neighbours(x, y) -> open adjacent coords for a grid[x][y] of maze cells."""
    w = len(grid)
    h = len(grid[0])

    def neighbors(x, y):
        out = []
        for direction, (dx, dy) in DELTAS.items():
            nx, ny = x + dx, y + dy
            if 0 <= nx < w and 0 <= ny < h and not grid[x][y].walls[direction]:
                out.append((nx, ny))
        return out

    return neighbors


def room_neighbors(rooms):
    """Same as grid_neighbors but over serialized rooms (dicts with has_*_wall keys)."""
    index = {(r["x"], r["y"]): r for r in rooms}

    def neighbors(x, y):
        room = index[(x, y)]
        out = []
        for direction, (dx, dy) in DELTAS.items():
            if room[f"has_{direction}_wall"]:
                continue
            if (x + dx, y + dy) in index:
                out.append((x + dx, y + dy))
        return out

    return neighbors


def bfs_parents(start, neighbors):
    parents = {start: None}
    q = deque([start])
    while q:
        cur = q.popleft()
        for nxt in neighbors(*cur):
            if nxt not in parents:
                parents[nxt] = cur
                q.append(nxt)
    return parents


def reachable(start, neighbors):
    return set(bfs_parents(start, neighbors))


def path_between(start, goal, neighbors):
    """Return the list of coords walked from start to goal (start excluded), or None."""
    parents = bfs_parents(start, neighbors)
    if goal not in parents:
        return None
    path = []
    cur = goal
    while cur != start:
        path.append(cur)
        cur = parents[cur]
    path.reverse()
    return path


def open_edges(grid):
    """Count open shared walls, each edge once."""
    w = len(grid)
    h = len(grid[0])
    total = 0
    for x in range(w):
        for y in range(h):
            for nx, ny in grid_neighbors(grid)(x, y):
                if (nx, ny) > (x, y):
                    total += 1
    return total


def wall_mismatches(grid):
    w = len(grid)
    h = len(grid[0])
    bad = []
    for x in range(w):
        for y in range(h):
            for direction, (dx, dy) in DELTAS.items():
                nx, ny = x + dx, y + dy
                if 0 <= nx < w and 0 <= ny < h:
                    if grid[x][y].walls[direction] != grid[nx][ny].walls[OPPOSITE[direction]]:
                        bad.append(((x, y), direction))
    return bad


def wall_snapshot(grid):
    return {(c.x, c.y): dict(c.walls) for column in grid for c in column}
