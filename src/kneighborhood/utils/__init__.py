"""Internal array and multiprocessing helpers."""
