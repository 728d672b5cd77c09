from collections import deque

from floorgen import TileKind


def bfs_reachable(grid, start):
    """Return set of (x,y) walkable tiles reachable from start (4-directional)."""
    if start is None or not grid.is_walkable(*start):
        return set()
    q = deque([start])
    vis = {start}
    while q:
        x, y = q.popleft()
        for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nx, ny = x + dx, y + dy
            if (nx, ny) not in vis and grid.is_walkable(nx, ny):
                vis.add((nx, ny))
                q.append((nx, ny))
    return vis


def all_walkable(grid):
    return {(x, y) for x in range(grid.width) for y in range(grid.height) if grid.tiles[x][y].walkable}


def unreachable_tiles(result):
    return all_walkable(result.grid) - bfs_reachable(result.grid, result.start)


def stairs_count(grid):
    return sum(1 for col in grid.tiles for t in col if t.kind is TileKind.STAIRS)


def edges_connect_all(n, edges):
    """True if the undirected graph on n nodes with ``edges`` is connected."""
    if n <= 1:
        return True
    adj = {i: set() for i in range(n)}
    for a, b in edges:
        adj[a].add(b)
        adj[b].add(a)
    seen = {0}
    stack = [0]
    while stack:
        cur = stack.pop()
        for nxt in adj[cur]:
            if nxt not in seen:
                seen.add(nxt)
                stack.append(nxt)
    return len(seen) == n


def carve_rect(grid, x, y, w, h):
    for ix in range(x, x + w):
        for iy in range(y, y + h):
            grid.carve(ix, iy)
