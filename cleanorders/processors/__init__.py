"""
Order processors: merge engine, migration pass, client limiter, code
allocator and search. Import the submodules directly.
"""
