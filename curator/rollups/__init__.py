"""Performance statistics and the rollups computed from them."""