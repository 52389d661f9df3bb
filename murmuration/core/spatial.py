import numpy as np
from scipy.spatial import KDTree


class SpatialIndex:
    """
    Nearest-neighbour lookup over one snapshot of agent positions.

    Built once per tick and discarded afterwards. IDs are indices into
    the point sequence given to build().
    """

    def __init__(self):
        self._tree = None
        self._n = 0

    @classmethod
    def from_points(cls, points):
        index = cls()
        index.build(points)
        return index

    def build(self, points):
        pts = np.asarray(points, dtype=float).reshape(-1, 2)
        self._n = pts.shape[0]
        # KDTree rejects an empty array; an empty index simply answers nothing
        self._tree = KDTree(pts) if self._n else None
        return self

    def __len__(self):
        return self._n

    def k_nearest(self, query, k):
        """
        IDs of the k points closest to `query`, nearest first.

        A query sitting on an indexed point gets that point back first
        (distance 0). Asking for more points than were indexed returns
        all of them.
        """
        if self._n == 0:
            return []
        k = min(int(k), self._n)
        if k <= 0:
            return []
        _, idxs = self._tree.query(np.asarray(query, dtype=float), k=k)
        return [int(i) for i in np.atleast_1d(idxs)]

    def neighbor_table(self, k):
        """
        For every indexed point, the IDs of its k nearest other points.

        Queries k + 1 so the self match can be dropped. The self match is
        removed by ID rather than by rank so coincident points do not
        confuse it.
        """
        if self._n == 0:
            return []
        k_query = min(int(k) + 1, self._n)
        # tree.query returns (N, k_query)
        _, idxs = self._tree.query(self._tree.data, k=k_query)
        idxs = np.asarray(idxs).reshape(self._n, k_query)

        table = []
        for own_id, row in enumerate(idxs):
            ids = [int(i) for i in row if i != own_id]
            table.append(ids[:k])
        return table
