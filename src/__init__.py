"""
Package marker for source code under `src`.
The book API lives in `src.api`; shared settings and logging helpers live in `src.common`.
"""
