import numpy as np
from scipy.sparse import csgraph, csr_matrix
from scipy.spatial import KDTree


def order_parameter(vel):
    """
    Global polarization of the flock.
    phi = | sum(v_i / |v_i|) | / N
    1 means everyone heads the same way, 0 means no common heading.
    Birds at rest count towards N but add no heading.
    """
    vel = np.asarray(vel, dtype=float)
    if vel.shape[0] == 0:
        return 0.0
    speeds = np.linalg.norm(vel, axis=1, keepdims=True)
    valid = speeds.flatten() > 1e-6
    if not np.any(valid):
        return 0.0

    headings = vel[valid] / speeds[valid]
    return float(np.linalg.norm(np.sum(headings, axis=0)) / vel.shape[0])


def fragmentation(pos, connection_radius):
    """
    Number of connected groups and the size of the largest one.
    Two birds are linked when they are closer than connection_radius.
    """
    pos = np.asarray(pos, dtype=float)
    n = pos.shape[0]
    if n == 0:
        return 0, 0

    pairs = KDTree(pos).query_pairs(connection_radius, output_type="ndarray")
    if len(pairs) == 0:
        return n, 1

    data = np.ones(len(pairs))
    adj = csr_matrix((data, (pairs[:, 0], pairs[:, 1])), shape=(n, n))
    n_components, labels = csgraph.connected_components(adj, directed=False)

    _, counts = np.unique(labels, return_counts=True)
    return int(n_components), int(np.max(counts))


def flock_summary(population, connection_radius):
    pos = population.positions()
    vel = population.velocities()
    n_fragments, largest = fragmentation(pos, connection_radius)
    return {
        "tick": population.tick,
        "mood": population.mood,
        "order": order_parameter(vel),
        "fragments": n_fragments,
        "cohesion": largest / len(population),
        "mean_speed": float(np.mean(np.linalg.norm(vel, axis=1))),
    }
